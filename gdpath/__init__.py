"""
Godot Path Generator (gdpath)

监听 Godot 项目文件变化，为当前编辑的场景生成节点路径常量（C#）
"""

__version__ = "1.2.0"
