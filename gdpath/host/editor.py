"""
编辑器查询接口

Orchestrator 只通过 EditorHost 获取当前编辑的场景。
ProjectEditorHost 是不依赖编辑器的独立实现：直接读取 .tscn 文件。
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from .filesystem import ProjectFileSystem
from .tscn_parser import load_scene
from ..core.scene_tree import SceneNode


class EditorHost(ABC):
    """
    编辑器查询接口

    每个实现必须提供：
    - get_edited_scene_root(): 当前编辑的场景根节点
    - get_script_path(): 节点挂载的脚本
    - get_scene_file(): 节点所属的场景文件
    """

    @abstractmethod
    def get_edited_scene_root(self) -> Optional[SceneNode]:
        """当前编辑的场景根节点；没有打开的场景时返回 None"""
        pass

    def get_script_path(self, node: SceneNode) -> Optional[str]:
        return node.script

    def get_scene_file(self, node: SceneNode) -> Optional[str]:
        return node.scene_file


class ProjectEditorHost(EditorHost):
    """
    基于项目目录的编辑器实现

    当前场景的选择规则：
    1. 指定了 scene 时使用该场景
    2. 否则使用最近修改的场景文件（通常是编辑器刚保存的那个）
    """

    def __init__(
        self,
        filesystem: ProjectFileSystem,
        scene: Optional[str] = None,
        scene_extensions: Sequence[str] = ('.tscn',),
        ignore_dirs: Sequence[str] = (),
    ):
        self.filesystem = filesystem
        self.scene = scene
        self.scene_extensions = tuple(scene_extensions)
        self.ignore_dirs = tuple(ignore_dirs)

    def get_edited_scene_path(self) -> Optional[str]:
        if self.scene:
            return self.scene if self.filesystem.exists(self.scene) else None

        latest: Optional[str] = None
        latest_mtime = -1.0
        for path in self.filesystem.iter_files(self.scene_extensions, self.ignore_dirs):
            try:
                mtime = self.filesystem.mtime(path)
            except OSError:
                continue
            if mtime > latest_mtime:
                latest, latest_mtime = path, mtime
        return latest

    def get_edited_scene_root(self) -> Optional[SceneNode]:
        scene_path = self.get_edited_scene_path()
        if scene_path is None:
            return None
        return load_scene(self.filesystem, scene_path)

    def __repr__(self) -> str:
        return f"<ProjectEditorHost root='{self.filesystem.root}' scene={self.scene!r}>"
