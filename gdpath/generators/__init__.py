"""
gdpath - 生成器模块
"""

from .path_writer import PathNamespaceWriter, build_resource_entries, render_class_file, render_resource_file

__all__ = [
    'PathNamespaceWriter',
    'build_resource_entries',
    'render_class_file',
    'render_resource_file',
]
