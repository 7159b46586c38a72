"""
命名规则

- 脚本路径 -> 类名
- 节点路径 -> 常量字段名
- 资源路径 -> 常量字段名
"""

from typing import Optional, Sequence

RES_SCHEME = "res://"

# C# 关键字不能直接作为字段名，需要加 @ 前缀
CSHARP_KEYWORDS = frozenset({
    'abstract', 'as', 'base', 'bool', 'break', 'byte', 'case', 'catch', 'char',
    'checked', 'class', 'const', 'continue', 'decimal', 'default', 'delegate',
    'do', 'double', 'else', 'enum', 'event', 'explicit', 'extern', 'false',
    'finally', 'fixed', 'float', 'for', 'foreach', 'goto', 'if', 'implicit',
    'in', 'int', 'interface', 'internal', 'is', 'lock', 'long', 'namespace',
    'new', 'null', 'object', 'operator', 'out', 'override', 'params', 'private',
    'protected', 'public', 'readonly', 'ref', 'return', 'sbyte', 'sealed',
    'short', 'sizeof', 'stackalloc', 'static', 'string', 'struct', 'switch',
    'this', 'throw', 'true', 'try', 'typeof', 'uint', 'ulong', 'unchecked',
    'unsafe', 'ushort', 'using', 'virtual', 'void', 'volatile', 'while',
})


def derive_class_name(path: str, extensions: Sequence[str] = ('.cs',)) -> Optional[str]:
    """
    从脚本路径推导类名

    规则：去掉目录，去掉扩展名，剩余部分必须是合法的 ASCII 标识符。

    Args:
        path: 脚本路径（如 res://scenes/Main.cs）
        extensions: 可识别的脚本扩展名

    Returns:
        类名；不是可识别的脚本或名称不合法时返回 None
    """
    base_name = path.replace('\\', '/').rsplit('/', 1)[-1]

    for ext in extensions:
        if base_name.endswith(ext):
            stem = base_name[:-len(ext)]
            break
    else:
        return None

    if not stem or not stem.isascii() or not stem.isidentifier():
        return None

    return stem


def _to_identifier(raw: str) -> str:
    """把任意字符串转换为合法的 C# 标识符"""
    chars = [c if (c.isascii() and (c.isalnum() or c == '_')) else '_' for c in raw]
    name = ''.join(chars)

    if not name:
        return '_'
    if name[0].isdigit():
        name = '_' + name
    if name in CSHARP_KEYWORDS:
        name = '@' + name

    return name


def node_field_name(node_path: str) -> str:
    """
    节点路径 -> 字段名

    /Main/World/Player -> Main_World_Player
    """
    return _to_identifier(node_path.lstrip('/').replace('/', '_'))


def resource_field_name(res_path: str) -> str:
    """
    资源路径 -> 字段名

    res://b/Scene.tscn -> b_Scene_tscn
    """
    stripped = res_path[len(RES_SCHEME):] if res_path.startswith(RES_SCHEME) else res_path
    return _to_identifier(stripped.replace('.', '_').replace('/', '_'))


def csharp_string_literal(value: str) -> str:
    """生成带引号的 C# 字符串字面量"""
    escaped = value.replace('\\', '\\\\').replace('"', '\\"')
    return f'"{escaped}"'
