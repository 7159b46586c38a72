"""
watchdog 事件桥接

把 watchdog 的文件系统事件转换为 Orchestrator 的四类通知：
- 新建/修改文件 -> on_filesystem_changed
- 删除文件 -> on_file_removed
- 删除目录 -> on_folder_removed
- 移动文件/目录 -> on_files_moved / on_folder_moved，然后 on_filesystem_changed

watchdog 在单个 emitter 线程上串行分发事件。
"""

import time
from pathlib import PurePosixPath
from typing import Optional, Sequence

from rich.console import Console
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..core.naming import RES_SCHEME
from .orchestrator import Orchestrator, PLUGIN_NAME


class ProjectEventHandler(FileSystemEventHandler):
    """Godot 项目目录的事件处理器"""

    def __init__(
        self,
        orchestrator: Orchestrator,
        ignore_dirs: Sequence[str] = (),
        ignore_files: Sequence[str] = (),
    ):
        """
        Args:
            orchestrator: 事件协调器
            ignore_dirs: 忽略的目录名（任意层级）
            ignore_files: 忽略的文件（res:// 路径），如状态文件
        """
        super().__init__()
        self.orchestrator = orchestrator
        self.filesystem = orchestrator.filesystem
        self.ignore_dirs = set(ignore_dirs)
        self.ignore_files = set(ignore_files)
        self.output_prefix = orchestrator.writer.output_dir.rstrip('/') + '/'

    def to_res_path(self, path) -> Optional[str]:
        """
        事件路径 -> res:// 路径

        Returns:
            res:// 路径；需要忽略的路径返回 None
        """
        if isinstance(path, bytes):
            path = path.decode('utf-8', errors='replace')

        res_path = self.filesystem.to_res_path(path)
        if res_path is None or res_path in self.ignore_files:
            return None
        if (res_path + '/').startswith(self.output_prefix):
            return None

        parts = PurePosixPath(res_path[len(RES_SCHEME):]).parts
        if any(part in self.ignore_dirs for part in parts):
            return None

        return res_path

    def on_created(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        if self.to_res_path(event.src_path) is not None:
            self.orchestrator.on_filesystem_changed()

    def on_modified(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        if self.to_res_path(event.src_path) is not None:
            self.orchestrator.on_filesystem_changed()

    def on_deleted(self, event: FileSystemEvent) -> None:
        res_path = self.to_res_path(event.src_path)
        if res_path is None:
            return

        if event.is_directory:
            self.orchestrator.on_folder_removed(res_path)
        else:
            self.orchestrator.on_file_removed(res_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        old_path = self.to_res_path(event.src_path)
        new_path = self.to_res_path(event.dest_path)
        if old_path is None and new_path is None:
            return

        if old_path is not None and new_path is None:
            # 移到了忽略目录或项目之外，按删除处理
            if event.is_directory:
                self.orchestrator.on_folder_removed(old_path)
            else:
                self.orchestrator.on_file_removed(old_path)
            return

        if old_path is not None:
            if event.is_directory:
                self.orchestrator.on_folder_moved(old_path, new_path)
            else:
                self.orchestrator.on_files_moved(old_path, new_path)

        self.orchestrator.on_filesystem_changed()


class ProjectWatcher:
    """
    项目监听器

    示例：
        watcher = ProjectWatcher(orchestrator, ignore_dirs=['.godot'])
        watcher.run_forever()
    """

    def __init__(
        self,
        orchestrator: Orchestrator,
        ignore_dirs: Sequence[str] = (),
        ignore_files: Sequence[str] = (),
        console: Optional[Console] = None,
    ):
        self.orchestrator = orchestrator
        self.handler = ProjectEventHandler(orchestrator, ignore_dirs, ignore_files)
        self.console = console or orchestrator.console
        self.observer: Optional[Observer] = None

    def start(self) -> None:
        """启动监听，并先为当前场景生成一次"""
        root = self.orchestrator.filesystem.root
        self.observer = Observer()
        self.observer.schedule(self.handler, str(root), recursive=True)
        self.observer.start()

        self.console.print(f"{PLUGIN_NAME}: Start Plugin ({root})")
        self.orchestrator.on_filesystem_changed()

    def stop(self) -> None:
        if self.observer is None:
            return
        self.observer.stop()
        self.observer.join()
        self.observer = None

    def run_forever(self, poll_interval: float = 1.0) -> None:
        """阻塞运行直到 Ctrl+C"""
        self.start()
        try:
            while True:
                time.sleep(poll_interval)
        except KeyboardInterrupt:
            self.console.print(f"\n{PLUGIN_NAME}: 监听已停止")
        finally:
            self.stop()
