"""
路径常量文件生成器

生成两类 C# 文件：
- <ClassName>Path.cs：当前场景的节点路径常量
- Res.cs：已跟踪的资源路径常量

两类文件都包在 `public static partial class GPG` 中，开头是固定的
"不要手动修改" 注释。
"""

from typing import Iterable, List, Optional, Tuple

from rich.console import Console
from rich.markup import escape

from ..core.errors import DirectoryCreateFailed, FileOpenFailed
from ..core.naming import csharp_string_literal, resource_field_name
from ..core.scene_tree import PathEntry, build_path_entries

NEWLINE = "\n"
INDENT = "    "

BANNER = [
    "/// <summary>",
    "/// Don't modify this file, let plugin update it",
    "/// Created by GodotPathGenerator",
    "/// </summary>",
]


def _render(namespace: str, class_name: str, fields: List[str]) -> str:
    lines = list(BANNER)
    lines.append(f"public static partial class {namespace}")
    lines.append("{")
    lines.append(f"{INDENT}public static class {class_name}")
    lines.append(f"{INDENT}{{")
    for field_line in fields:
        lines.append(f"{INDENT * 2}{field_line}")
    lines.append(f"{INDENT}}}")
    lines.append("}")
    return NEWLINE.join(lines) + NEWLINE


def render_class_file(namespace: str, class_name: str, entries: Iterable[PathEntry]) -> str:
    """
    渲染节点路径类

    Args:
        namespace: 外层静态类名（GPG）
        class_name: 脚本类名（不含 Path 后缀）
        entries: 节点路径条目，按顺序输出

    Returns:
        C# 源码
    """
    fields = [
        f"public const string {entry.field_name} = {csharp_string_literal('/root' + entry.node_path)};"
        for entry in entries
    ]
    return _render(namespace, f"{class_name}Path", fields)


def build_resource_entries(resource_paths: Iterable[str]) -> Tuple[List[Tuple[str, str]], List[Tuple[str, str]]]:
    """
    资源路径 -> (字段名, 路径) 列表

    按路径排序；字段名相同的资源保留第一个，其余作为冲突返回

    Returns:
        (entries, collisions)
    """
    entries: List[Tuple[str, str]] = []
    collisions: List[Tuple[str, str]] = []
    seen = set()

    for path in sorted(resource_paths):
        field_name = resource_field_name(path)
        if field_name in seen:
            collisions.append((field_name, path))
            continue
        seen.add(field_name)
        entries.append((field_name, path))

    return entries, collisions


def render_resource_file(namespace: str, resource_class: str, resource_paths: Iterable[str]) -> str:
    """
    渲染资源路径类

    资源按路径排序，保证同一集合生成的内容完全一致
    """
    entries, _ = build_resource_entries(resource_paths)
    fields = [
        f"public const string {field_name} = {csharp_string_literal(path)};"
        for field_name, path in entries
    ]
    return _render(namespace, resource_class, fields)


class PathNamespaceWriter:
    """
    路径常量文件写入器

    示例：
        writer = PathNamespaceWriter(fs, "res://script/gpg")
        writer.write_class_file("Main", ["/Main", "/Main/HUD"])
        writer.write_resource_file({"res://Main.tscn"})
        writer.remove_class_file("Main")
    """

    def __init__(
        self,
        filesystem,
        output_dir: str = "res://script/gpg",
        extension: str = "cs",
        namespace: str = "GPG",
        resource_class: str = "Res",
        console: Optional[Console] = None,
    ):
        """
        初始化写入器

        Args:
            filesystem: ProjectFileSystem
            output_dir: 生成目录（res:// 路径）
            extension: 生成文件扩展名
            namespace: 外层静态类名
            resource_class: 资源类名
            console: 输出控制台
        """
        self.filesystem = filesystem
        self.output_dir = output_dir.rstrip('/')
        self.extension = extension.lstrip('.')
        self.namespace = namespace
        self.resource_class = resource_class
        self.console = console or Console()

    def class_file_path(self, class_name: str) -> str:
        return f"{self.output_dir}/{class_name}Path.{self.extension}"

    def resource_file_path(self) -> str:
        return f"{self.output_dir}/{self.resource_class}.{self.extension}"

    def class_file_exists(self, class_name: str) -> bool:
        return self.filesystem.exists(self.class_file_path(class_name))

    def write_class_file(self, class_name: str, path_list: List[str]) -> str:
        """
        生成 <ClassName>Path 文件

        Args:
            class_name: 脚本类名
            path_list: 场景树展开后的节点路径

        Returns:
            生成文件的 res:// 路径

        Raises:
            DirectoryCreateFailed: 无法创建生成目录
            FileOpenFailed: 无法写入文件
        """
        entries, collisions = build_path_entries(path_list)
        for entry in collisions:
            self.warn(f"节点 '{entry.node_path}' 与已有字段 '{entry.field_name}' 重名，已跳过")

        content = render_class_file(self.namespace, class_name, entries)
        file_path = self.class_file_path(class_name)
        self._write(file_path, content)
        return file_path

    def write_resource_file(self, resource_paths: Iterable[str]) -> str:
        """
        生成 Res 文件

        Args:
            resource_paths: 已跟踪的资源路径集合

        Returns:
            生成文件的 res:// 路径
        """
        resource_paths = list(resource_paths)
        _, collisions = build_resource_entries(resource_paths)
        for field_name, path in collisions:
            self.warn(f"资源 '{path}' 与已有字段 '{field_name}' 重名，已跳过")

        content = render_resource_file(self.namespace, self.resource_class, resource_paths)
        file_path = self.resource_file_path()
        self._write(file_path, content)
        return file_path

    def remove_class_file(self, class_name: str) -> bool:
        """
        删除 <ClassName>Path 文件

        Returns:
            True 如果文件存在并已删除；文件不存在不算错误
        """
        return self._remove(self.class_file_path(class_name))

    def remove_resource_file(self) -> bool:
        return self._remove(self.resource_file_path())

    def rename_class_file(self, old_class_name: str, new_class_name: str, keep_old: bool = False) -> bool:
        """
        重命名生成文件，并同步文件中的类声明

        写入失败时把文件移回原位置，旧类名对应的文件保持不变

        Args:
            old_class_name: 原类名
            new_class_name: 新类名
            keep_old: 保留旧文件（旧类名仍被其他脚本使用时），只写出新文件

        Returns:
            True 如果旧文件存在并已重命名
        """
        old_path = self.class_file_path(old_class_name)
        if not self.filesystem.exists(old_path):
            return False

        old_decl = f"{INDENT}public static class {old_class_name}Path{NEWLINE}"
        new_decl = f"{INDENT}public static class {new_class_name}Path{NEWLINE}"
        new_path = self.class_file_path(new_class_name)

        try:
            content = self.filesystem.read_text(old_path)
        except OSError as e:
            raise FileOpenFailed(f"无法读取 '{old_path}': {e}", old_path) from e
        content = content.replace(old_decl, new_decl, 1)

        if keep_old:
            self._write(new_path, content)
            return True

        try:
            self.filesystem.rename(old_path, new_path)
        except OSError as e:
            raise FileOpenFailed(f"无法重命名 '{old_path}': {e}", old_path) from e

        try:
            self._write(new_path, content)
        except FileOpenFailed:
            try:
                self.filesystem.rename(new_path, old_path)
            except OSError as e:
                raise FileOpenFailed(f"无法恢复 '{old_path}': {e}", old_path) from e
            raise
        return True

    def warn(self, message: str) -> None:
        self.console.print(f"[yellow]GodotPathGenerator: 警告: {escape(message)}[/yellow]")

    def _ensure_output_dir(self) -> None:
        if self.filesystem.dir_exists(self.output_dir):
            return
        try:
            self.filesystem.make_dir_recursive(self.output_dir)
        except OSError as e:
            raise DirectoryCreateFailed(f"无法创建目录 '{self.output_dir}': {e}", self.output_dir) from e

    def _write(self, file_path: str, content: str) -> None:
        self._ensure_output_dir()
        try:
            with self.filesystem.open_write(file_path) as f:
                f.write(content)
        except OSError as e:
            raise FileOpenFailed(f"无法创建文件 '{file_path}': {e}", file_path) from e

    def _remove(self, file_path: str) -> bool:
        try:
            return self.filesystem.remove(file_path)
        except OSError as e:
            raise FileOpenFailed(f"无法删除文件 '{file_path}': {e}", file_path) from e
