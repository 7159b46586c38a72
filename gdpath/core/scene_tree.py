"""
场景树展开

把场景根节点及其子孙节点展开为斜杠分隔的路径列表（先序遍历）
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .naming import node_field_name


@dataclass
class SceneNode:
    """场景节点"""

    name: str
    children: List["SceneNode"] = field(default_factory=list)
    type: str = ""
    script: Optional[str] = None  # 挂载脚本的 res:// 路径
    scene_file: Optional[str] = None  # 仅根节点：场景文件的 res:// 路径

    def add_child(self, child: "SceneNode") -> "SceneNode":
        self.children.append(child)
        return child

    def count(self) -> int:
        """子树中的节点总数（包括自身）"""
        return 1 + sum(child.count() for child in self.children)


@dataclass(frozen=True)
class PathEntry:
    """节点路径与字段名"""

    node_path: str  # /Main/World/Player
    field_name: str  # Main_World_Player


def flatten_scene_tree(root: SceneNode) -> List[str]:
    """
    先序遍历场景树

    Args:
        root: 场景根节点

    Returns:
        路径列表，根节点为 /<name>，子节点为 <父路径>/<name>
    """
    path_list: List[str] = []
    _traverse("", root, path_list)
    return path_list


def _traverse(prefix: str, node: SceneNode, path_list: List[str]) -> None:
    path = prefix + "/" + node.name
    path_list.append(path)

    for child in node.children:
        _traverse(path, child, path_list)


class SceneTreeFlattener:
    """场景树展开器"""

    def flatten(self, root: SceneNode) -> List[str]:
        return flatten_scene_tree(root)

    def entries(self, root: SceneNode) -> Tuple[List[PathEntry], List[PathEntry]]:
        return build_path_entries(self.flatten(root))


def build_path_entries(path_list: List[str]) -> Tuple[List[PathEntry], List[PathEntry]]:
    """
    路径列表 -> PathEntry 列表

    同名兄弟节点会得到相同的字段名，保留第一个，其余作为冲突返回

    Args:
        path_list: flatten_scene_tree 的输出

    Returns:
        (entries, collisions)
    """
    entries: List[PathEntry] = []
    collisions: List[PathEntry] = []
    seen = set()

    for path in path_list:
        entry = PathEntry(node_path=path, field_name=node_field_name(path))
        if entry.field_name in seen:
            collisions.append(entry)
            continue
        seen.add(entry.field_name)
        entries.append(entry)

    return entries, collisions
