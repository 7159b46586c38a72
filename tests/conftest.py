"""
测试公共 fixture：临时 Godot 项目
"""

import io
import os
import sys

import pytest
from rich.console import Console

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from gdpath.generators.path_writer import PathNamespaceWriter
from gdpath.host.filesystem import ProjectFileSystem
from gdpath.tracking.tracker import GenerationTracker

MAIN_SCENE = """[gd_scene load_steps=2 format=2]

[ext_resource path="res://Main.cs" type="Script" id=1]

[node name="Main" type="Node2D"]
script = ExtResource( 1 )

[node name="HUD" type="CanvasLayer" parent="."]

[node name="World" type="Node2D" parent="."]

[node name="Player" type="KinematicBody2D" parent="World"]
"""

MAIN_SCRIPT = """using Godot;

public class Main : Node2D
{
}
"""


def write_file(root, rel_path, content=""):
    target = root / rel_path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    return target


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200)


def console_output(console):
    return console.file.getvalue()


@pytest.fixture
def project(tmp_path):
    """包含 Main.tscn + Main.cs 的最小项目"""
    write_file(tmp_path, "project.godot", "[application]\n")
    write_file(tmp_path, "Main.tscn", MAIN_SCENE)
    write_file(tmp_path, "Main.cs", MAIN_SCRIPT)
    return tmp_path


@pytest.fixture
def filesystem(project):
    return ProjectFileSystem(project)


@pytest.fixture
def writer(filesystem, console):
    return PathNamespaceWriter(filesystem, "res://script/gpg", console=console)


@pytest.fixture
def tracker(writer):
    return GenerationTracker(writer)


def generated_class_files(project):
    """输出目录中除 Res.cs 以外的生成文件名"""
    output_dir = project / "script" / "gpg"
    if not output_dir.exists():
        return set()
    return {p.name for p in output_dir.iterdir() if p.is_file() and p.name != "Res.cs"}


def assert_tracker_invariant(project, tracker):
    expected = {f"{class_name}Path.cs" for class_name in tracker.scripts.values()}
    assert generated_class_files(project) == expected
