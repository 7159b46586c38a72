"""
Orchestrator

接收文件系统通知，决定需要重新生成什么，并调用各组件：

- filesystem_changed -> 当前场景：去抖 -> 展开场景树 -> 写 <ClassName>Path -> 记录
- file_removed / files_moved / folder_removed / folder_moved -> GenerationTracker
"""

import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from ..core.config import Config
from ..core.errors import GenerationError, MissingSourceFile, PatternNoMatch
from ..core.naming import derive_class_name
from ..core.scene_tree import SceneNode, SceneTreeFlattener
from ..generators.path_writer import PathNamespaceWriter
from ..host.editor import EditorHost, ProjectEditorHost
from ..host.filesystem import ProjectFileSystem
from ..tracking.debouncer import ChangeDebouncer
from ..tracking.state import TrackerState
from ..tracking.tracker import GenerationTracker

PLUGIN_NAME = "GodotPathGenerator"


class Orchestrator:
    """
    文件系统事件协调器

    所有通知在同一线程中串行处理；状态只在这里被修改。
    """

    def __init__(
        self,
        host: EditorHost,
        filesystem: ProjectFileSystem,
        writer: PathNamespaceWriter,
        tracker: GenerationTracker,
        debouncer: Optional[ChangeDebouncer] = None,
        script_extensions: Sequence[str] = ('.cs',),
        state_file: Optional[Path] = None,
        console: Optional[Console] = None,
        verbose: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        初始化协调器

        Args:
            host: 编辑器查询接口
            filesystem: res:// 文件系统
            writer: 路径常量文件写入器
            tracker: 生成跟踪器
            debouncer: 去抖器（默认 100ms）
            script_extensions: 可识别的脚本扩展名
            state_file: 状态持久化文件；None 表示不持久化
            console: 输出控制台
            verbose: 打印每个事件
            clock: 单调时钟
        """
        self.host = host
        self.filesystem = filesystem
        self.writer = writer
        self.tracker = tracker
        self.debouncer = debouncer or ChangeDebouncer()
        self.script_extensions = tuple(script_extensions)
        self.state_file = state_file
        self.console = console or Console()
        self.verbose = verbose
        self.clock = clock
        self.flattener = SceneTreeFlattener()

    @classmethod
    def from_config(
        cls,
        config: Config,
        scene: Optional[str] = None,
        console: Optional[Console] = None,
        verbose: bool = False,
    ) -> "Orchestrator":
        """
        按配置构建完整的组件链

        Args:
            config: 项目配置
            scene: 固定的场景路径（默认使用最近修改的场景）
            console: 输出控制台
            verbose: 打印每个事件
        """
        console = console or Console()
        filesystem = ProjectFileSystem(config.project_path)
        writer = PathNamespaceWriter(
            filesystem,
            output_dir=config.output_dir,
            extension=config.output_extension,
            namespace=config.namespace,
            resource_class=config.resource_class,
            console=console,
        )

        state_file = config.state_file if config.persist_state else None
        state = None
        if state_file is not None:
            try:
                state = TrackerState.load(state_file)
            except ValueError as e:
                console.print(f"[yellow]{PLUGIN_NAME}: 警告: {e}，使用空状态[/yellow]")

        tracker = GenerationTracker(
            writer,
            state=state,
            script_extensions=config.script_extensions,
            resource_extensions=config.resource_extensions,
        )
        pruned = tracker.prune_missing()
        if pruned and verbose:
            console.print(f"[dim]{PLUGIN_NAME}: 移除 {pruned} 个生成文件已丢失的脚本记录[/dim]")

        host = ProjectEditorHost(
            filesystem,
            scene=scene,
            scene_extensions=config.resource_extensions,
            ignore_dirs=config.ignore_dirs,
        )

        return cls(
            host=host,
            filesystem=filesystem,
            writer=writer,
            tracker=tracker,
            debouncer=ChangeDebouncer(config.debounce_seconds),
            script_extensions=config.script_extensions,
            state_file=state_file,
            console=console,
            verbose=verbose,
        )

    # ------------------------------------------------------------------
    # 通知入口
    # ------------------------------------------------------------------

    def on_filesystem_changed(self) -> Dict[str, Any]:
        """
        文件系统变化：为当前编辑的场景生成节点路径

        Returns:
            结果字典（generated, reason, class_name, file, ...）
        """
        self._trace("OnFilesystemChanged")

        try:
            root = self.host.get_edited_scene_root()
        except GenerationError as e:
            return self._fail(e)

        if root is None:
            return {'generated': False, 'reason': 'no edited scene'}

        if not self.debouncer.should_process(root.name, self.clock()):
            return {'generated': False, 'reason': 'debounced'}

        return self.generate_scene(root)

    def on_file_removed(self, file_path: str) -> bool:
        self._trace(f"OnFileRemoved; filePath: {file_path}")
        return self._delegate(self.tracker.on_file_removed, file_path)

    def on_files_moved(self, old_path: str, new_path: str) -> bool:
        self._trace(f"OnFilesMoved; oldFile: {old_path}, newFile: {new_path}")
        return self._delegate(self.tracker.on_files_moved, old_path, new_path)

    def on_folder_removed(self, folder: str) -> bool:
        self._trace(f"OnFolderRemoved; folder: {folder}")
        return self._delegate(self.tracker.on_folder_removed, folder)

    def on_folder_moved(self, old_folder: str, new_folder: str) -> bool:
        self._trace(f"OnFolderMoved; oldFolder: {old_folder}, newFolder: {new_folder}")
        return self._delegate(self.tracker.on_folder_moved, old_folder, new_folder)

    # ------------------------------------------------------------------
    # 生成
    # ------------------------------------------------------------------

    def generate_scene(self, root: SceneNode) -> Dict[str, Any]:
        """
        为指定场景执行一次生成（不经过去抖）

        Args:
            root: 场景根节点

        Returns:
            结果字典
        """
        try:
            return self._run_generation(root)
        except GenerationError as e:
            return self._fail(e)
        finally:
            self._save_state()

    def _run_generation(self, root: SceneNode) -> Dict[str, Any]:
        script_path = self.host.get_script_path(root)
        if not script_path or not script_path.endswith(self.script_extensions):
            return {'generated': False, 'reason': 'no script'}

        scene_file = self.host.get_scene_file(root)
        if not self.filesystem.exists(script_path):
            raise MissingSourceFile(f"脚本文件不存在: {script_path}", script_path)
        if not scene_file or not self.filesystem.exists(scene_file):
            raise MissingSourceFile(f"场景文件不存在: {scene_file}", scene_file or "")

        class_name = derive_class_name(script_path, self.script_extensions)
        if class_name is None:
            raise PatternNoMatch(f"无法从脚本路径推导类名: {script_path}", script_path)

        path_list = self.flattener.flatten(root)
        file_path = self.writer.write_class_file(class_name, path_list)
        self.tracker.record_script(script_path, class_name)

        resource_added = False
        if self.tracker.should_track_resource(scene_file):
            resource_added = self.tracker.add_resource(scene_file)

        self.console.print(f"[green]{PLUGIN_NAME}: generated node path[/green] {file_path}")

        return {
            'generated': True,
            'class_name': class_name,
            'script_path': script_path,
            'scene_file': scene_file,
            'file': file_path,
            'node_count': len(path_list),
            'resource_added': resource_added,
        }

    # ------------------------------------------------------------------
    # 内部
    # ------------------------------------------------------------------

    def _delegate(self, handler: Callable[..., bool], *args: str) -> bool:
        try:
            return handler(*args)
        except GenerationError as e:
            self._fail(e)
            return False
        finally:
            self._save_state()

    def _fail(self, error: GenerationError) -> Dict[str, Any]:
        self.console.print(f"[red]{PLUGIN_NAME}: {error.kind}: {escape(str(error))}[/red]")
        return {'generated': False, 'reason': error.kind, 'error': str(error)}

    def _save_state(self) -> None:
        if self.state_file is None:
            return
        try:
            self.tracker.state.save(self.state_file)
        except OSError as e:
            self.console.print(f"[yellow]{PLUGIN_NAME}: 警告: 无法保存状态文件: {e}[/yellow]")

    def _trace(self, message: str) -> None:
        if self.verbose:
            self.console.print(f"[dim]{message}[/dim]")

    def __repr__(self) -> str:
        return f"<Orchestrator host={self.host!r} tracker={self.tracker!r}>"
