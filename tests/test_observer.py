"""
watchdog 事件桥接测试
"""

from types import SimpleNamespace

import pytest
from watchdog.events import (
    DirDeletedEvent, DirModifiedEvent, DirMovedEvent, FileCreatedEvent,
    FileDeletedEvent, FileModifiedEvent, FileMovedEvent,
)

from gdpath.host.filesystem import ProjectFileSystem
from gdpath.watcher.observer import ProjectEventHandler


class RecordingOrchestrator:
    """记录收到的通知"""

    def __init__(self, filesystem, output_dir="res://script/gpg"):
        self.filesystem = filesystem
        self.writer = SimpleNamespace(output_dir=output_dir)
        self.calls = []

    def on_filesystem_changed(self):
        self.calls.append(("changed",))

    def on_file_removed(self, path):
        self.calls.append(("file_removed", path))

    def on_files_moved(self, old, new):
        self.calls.append(("files_moved", old, new))

    def on_folder_removed(self, folder):
        self.calls.append(("folder_removed", folder))

    def on_folder_moved(self, old, new):
        self.calls.append(("folder_moved", old, new))


@pytest.fixture
def root(tmp_path):
    return ProjectFileSystem(tmp_path).root


@pytest.fixture
def orchestrator(root):
    return RecordingOrchestrator(ProjectFileSystem(root))


@pytest.fixture
def handler(orchestrator):
    return ProjectEventHandler(
        orchestrator,
        ignore_dirs=[".godot", ".import"],
        ignore_files=["res://.gdpath_state.json"],
    )


def p(root, rel):
    return str(root / rel)


class TestPathFilter:
    def test_project_path(self, handler, root):
        assert handler.to_res_path(p(root, "scenes/Main.tscn")) == "res://scenes/Main.tscn"

    def test_bytes_path(self, handler, root):
        assert handler.to_res_path(p(root, "Main.cs").encode("utf-8")) == "res://Main.cs"

    @pytest.mark.parametrize("rel", [
        "script/gpg/MainPath.cs",
        "script/gpg",
        ".godot/editor/Main.tscn-folding",
        "addons/.import/icon.png",
        ".gdpath_state.json",
    ])
    def test_ignored(self, handler, root, rel):
        assert handler.to_res_path(p(root, rel)) is None

    def test_outside_project(self, handler, tmp_path):
        assert handler.to_res_path(str(tmp_path.parent / "elsewhere.cs")) is None

    def test_output_prefix_is_not_substring_match(self, handler, root):
        assert handler.to_res_path(p(root, "script/gpgx/Main.cs")) == "res://script/gpgx/Main.cs"


class TestEvents:
    def test_created_and_modified(self, handler, orchestrator, root):
        handler.on_created(FileCreatedEvent(p(root, "Main.tscn")))
        handler.on_modified(FileModifiedEvent(p(root, "Main.cs")))
        assert orchestrator.calls == [("changed",), ("changed",)]

    def test_generated_file_does_not_retrigger(self, handler, orchestrator, root):
        handler.on_modified(FileModifiedEvent(p(root, "script/gpg/MainPath.cs")))
        handler.on_modified(FileModifiedEvent(p(root, ".gdpath_state.json")))
        assert orchestrator.calls == []

    def test_directory_modified_is_ignored(self, handler, orchestrator, root):
        handler.on_modified(DirModifiedEvent(p(root, "scenes")))
        assert orchestrator.calls == []

    def test_file_deleted(self, handler, orchestrator, root):
        handler.on_deleted(FileDeletedEvent(p(root, "Main.cs")))
        assert orchestrator.calls == [("file_removed", "res://Main.cs")]

    def test_dir_deleted(self, handler, orchestrator, root):
        handler.on_deleted(DirDeletedEvent(p(root, "ui")))
        assert orchestrator.calls == [("folder_removed", "res://ui")]

    def test_file_moved(self, handler, orchestrator, root):
        handler.on_moved(FileMovedEvent(p(root, "a/Scene.tscn"), p(root, "b/Scene.tscn")))
        assert orchestrator.calls == [
            ("files_moved", "res://a/Scene.tscn", "res://b/Scene.tscn"),
            ("changed",),
        ]

    def test_dir_moved(self, handler, orchestrator, root):
        handler.on_moved(DirMovedEvent(p(root, "ui"), p(root, "gui")))
        assert orchestrator.calls == [("folder_moved", "res://ui", "res://gui"), ("changed",)]

    def test_moved_into_ignored_dir_is_removal(self, handler, orchestrator, root):
        handler.on_moved(FileMovedEvent(p(root, "Main.cs"), p(root, ".godot/Main.cs")))
        assert orchestrator.calls == [("file_removed", "res://Main.cs")]

    def test_moved_in_from_ignored_dir_is_change(self, handler, orchestrator, root):
        handler.on_moved(FileMovedEvent(p(root, ".godot/Main.tscn.tmp"), p(root, "Main.tscn")))
        assert orchestrator.calls == [("changed",)]
