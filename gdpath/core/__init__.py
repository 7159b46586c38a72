"""
gdpath - 核心模块

配置、错误类型、命名规则与场景树展开
"""

from .config import Config
from .errors import (
    GenerationError,
    DirectoryCreateFailed,
    FileOpenFailed,
    PatternNoMatch,
    MissingSourceFile,
    SceneParseError,
)
from .naming import derive_class_name, node_field_name, resource_field_name
from .scene_tree import SceneNode, PathEntry, SceneTreeFlattener, flatten_scene_tree, build_path_entries

__all__ = [
    'Config',
    'GenerationError',
    'DirectoryCreateFailed',
    'FileOpenFailed',
    'PatternNoMatch',
    'MissingSourceFile',
    'SceneParseError',
    'derive_class_name',
    'node_field_name',
    'resource_field_name',
    'SceneNode',
    'PathEntry',
    'SceneTreeFlattener',
    'flatten_scene_tree',
    'build_path_entries',
]
