"""
.tscn 场景解析器

解析 Godot 文本场景文件，构建 SceneNode 树。

支持：
- Godot 3 格式：ExtResource( 1 )
- Godot 4 格式：ExtResource("1_abcde")
- [ext_resource] 脚本引用
- [node] 层级（parent 属性）
- 节点上的 script 属性

实例化的子场景只作为一个节点出现，不展开其内部节点。
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..core.errors import SceneParseError
from ..core.scene_tree import SceneNode

HEADER_PATTERN = re.compile(r'^\[(\w+)(.*)\]\s*$')
ATTRIBUTE_PATTERN = re.compile(r'(\w+)=("(?:[^"\\]|\\.)*"|\w+\([^)]*\)|[^\s\]]+)')
PROPERTY_PATTERN = re.compile(r'^([\w/]+)\s*=\s*(.+?)\s*$')
EXT_RESOURCE_REF_PATTERN = re.compile(r'^ExtResource\(\s*"?([^")\s]+)"?\s*\)$')


@dataclass
class ExtResource:
    """外部资源引用"""

    id: str
    path: str
    type: str = ""


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return re.sub(r'\\(.)', r'\1', value[1:-1])
    return value


def parse_attributes(text: str) -> Dict[str, str]:
    """
    解析段头中的 key=value 属性

    Args:
        text: 段头中段名之后的部分，如 ' name="HUD" parent="."'

    Returns:
        属性字典（值已去除引号）
    """
    return {key: _unquote(value) for key, value in ATTRIBUTE_PATTERN.findall(text)}


def parse_ext_resource_ref(value: str) -> Optional[str]:
    """ExtResource( 1 ) / ExtResource("1_ab") -> 资源 id"""
    match = EXT_RESOURCE_REF_PATTERN.match(value.strip())
    return match.group(1) if match else None


class TscnParser:
    """Godot 文本场景解析器"""

    def __init__(self, script_type: str = "Script"):
        self.script_type = script_type

    def parse(self, content: str, scene_file: str = "") -> SceneNode:
        """
        解析场景文本

        Args:
            content: .tscn 文件内容
            scene_file: 场景文件的 res:// 路径（写入根节点）

        Returns:
            场景根节点

        Raises:
            SceneParseError: 没有根节点或节点的父节点无法解析
        """
        ext_resources: Dict[str, ExtResource] = {}
        node_sections: List[Tuple[Dict[str, str], Optional[str]]] = []

        section: Optional[str] = None
        for line_no, raw_line in enumerate(content.splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith(';'):
                continue

            header = HEADER_PATTERN.match(line)
            if header:
                section = header.group(1)
                attrs = parse_attributes(header.group(2))

                if section == 'ext_resource':
                    if 'id' not in attrs or 'path' not in attrs:
                        raise SceneParseError(
                            f"第 {line_no} 行: ext_resource 缺少 id 或 path", scene_file
                        )
                    ext_resources[attrs['id']] = ExtResource(
                        id=attrs['id'], path=attrs['path'], type=attrs.get('type', '')
                    )
                elif section == 'node':
                    if 'name' not in attrs:
                        raise SceneParseError(f"第 {line_no} 行: node 缺少 name", scene_file)
                    node_sections.append((attrs, None))
                continue

            if section != 'node':
                continue

            prop = PROPERTY_PATTERN.match(line)
            if prop and prop.group(1) == 'script':
                attrs, _ = node_sections[-1]
                node_sections[-1] = (attrs, parse_ext_resource_ref(prop.group(2)))

        return self._build_tree(node_sections, ext_resources, scene_file)

    def _build_tree(
        self,
        node_sections: List[Tuple[Dict[str, str], Optional[str]]],
        ext_resources: Dict[str, ExtResource],
        scene_file: str,
    ) -> SceneNode:
        if not node_sections:
            raise SceneParseError("场景中没有节点", scene_file)

        root: Optional[SceneNode] = None
        nodes_by_path: Dict[str, SceneNode] = {}
        instanced: List[str] = []

        for attrs, script_id in node_sections:
            node = SceneNode(
                name=attrs['name'],
                type=attrs.get('type', ''),
                script=self._resolve_script(script_id, ext_resources),
            )

            parent_path = attrs.get('parent')
            if parent_path is None:
                if root is not None:
                    raise SceneParseError(f"场景中有多个根节点: {node.name}", scene_file)
                root = node
                root.scene_file = scene_file or None
                nodes_by_path['.'] = root
                continue

            parent = nodes_by_path.get(parent_path)
            if parent is None:
                # 可编辑子节点：覆盖实例化场景内部节点的属性，不展开
                if any(parent_path.startswith(p + '/') for p in instanced):
                    continue
                raise SceneParseError(
                    f"节点 '{node.name}' 的父节点 '{parent_path}' 不存在", scene_file
                )

            node_path = node.name if parent_path == '.' else f"{parent_path}/{node.name}"
            if node_path in nodes_by_path:
                continue
            parent.add_child(node)
            nodes_by_path[node_path] = node
            if 'instance' in attrs or 'instance_placeholder' in attrs:
                instanced.append(node_path)

        if root is None:
            raise SceneParseError("场景中没有根节点", scene_file)

        return root

    def _resolve_script(self, script_id: Optional[str], ext_resources: Dict[str, ExtResource]) -> Optional[str]:
        if script_id is None:
            return None
        resource = ext_resources.get(script_id)
        if resource is None or resource.type != self.script_type:
            return None
        return resource.path


def load_scene(filesystem, scene_path: str) -> SceneNode:
    """
    读取并解析场景文件

    Args:
        filesystem: ProjectFileSystem
        scene_path: 场景的 res:// 路径

    Returns:
        场景根节点
    """
    try:
        content = filesystem.read_text(scene_path)
    except OSError as e:
        raise SceneParseError(f"无法读取场景文件: {e}", scene_path) from e

    return TscnParser().parse(content, scene_file=scene_path)
