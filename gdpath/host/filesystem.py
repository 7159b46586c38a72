"""
项目文件系统

把 Godot 的 res:// 路径映射到项目目录
"""

import os
from pathlib import Path
from typing import IO, Iterator, Optional, Sequence

from ..core.naming import RES_SCHEME


class ProjectFileSystem:
    """
    res:// 路径命名空间上的文件操作

    所有方法接受 res:// 路径或普通路径（相对项目根目录）。
    失败时抛出 OSError，由调用方转换为具体的生成错误。
    """

    def __init__(self, root: Path):
        self.root = Path(root).resolve()

    def to_absolute(self, path: str) -> Path:
        """res://a/b.cs -> <root>/a/b.cs"""
        if path.startswith(RES_SCHEME):
            path = path[len(RES_SCHEME):]
        return self.root / path.lstrip('/')

    def to_res_path(self, path: os.PathLike) -> Optional[str]:
        """
        绝对路径 -> res:// 路径

        Returns:
            res:// 路径；不在项目内时返回 None
        """
        try:
            relative = Path(path).resolve().relative_to(self.root)
        except ValueError:
            return None
        if relative == Path('.'):
            return RES_SCHEME
        return RES_SCHEME + relative.as_posix()

    def exists(self, path: str) -> bool:
        return self.to_absolute(path).is_file()

    def dir_exists(self, path: str) -> bool:
        return self.to_absolute(path).is_dir()

    def make_dir_recursive(self, path: str) -> None:
        self.to_absolute(path).mkdir(parents=True, exist_ok=True)

    def open_write(self, path: str) -> IO[str]:
        """以覆盖模式打开文本文件（UTF-8，\\n 换行）"""
        return open(self.to_absolute(path), 'w', encoding='utf-8', newline='\n')

    def read_text(self, path: str) -> str:
        return self.to_absolute(path).read_text(encoding='utf-8')

    def remove(self, path: str) -> bool:
        """
        删除文件

        Returns:
            True 如果文件存在并已删除
        """
        target = self.to_absolute(path)
        if not target.is_file():
            return False
        target.unlink()
        return True

    def rename(self, old_path: str, new_path: str) -> None:
        os.replace(self.to_absolute(old_path), self.to_absolute(new_path))

    def mtime(self, path: str) -> float:
        return self.to_absolute(path).stat().st_mtime

    def iter_files(self, extensions: Sequence[str], ignore_dirs: Sequence[str] = ()) -> Iterator[str]:
        """
        遍历项目中指定扩展名的文件

        Yields:
            res:// 路径（按路径排序）
        """
        ignored = set(ignore_dirs)
        found = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames[:] = [d for d in dirnames if d not in ignored]
            for filename in filenames:
                if any(filename.endswith(ext) for ext in extensions):
                    found.append(self.to_res_path(Path(dirpath) / filename))
        yield from sorted(found)

    def __repr__(self) -> str:
        return f"ProjectFileSystem(root={self.root})"
