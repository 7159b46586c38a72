"""
gdpath - Host 模块

编辑器查询接口、res:// 文件系统与 .tscn 解析
"""

from .filesystem import ProjectFileSystem
from .tscn_parser import TscnParser, load_scene
from .editor import EditorHost, ProjectEditorHost

__all__ = [
    'ProjectFileSystem',
    'TscnParser',
    'load_scene',
    'EditorHost',
    'ProjectEditorHost',
]
