"""
gdpath - 配置管理模块

负责加载和管理生成器配置（gdpath.yaml）
"""

import copy
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List

CONFIG_FILE_NAME = "gdpath.yaml"

DEFAULT_CONFIG: Dict[str, Any] = {
    'project': {
        'name': 'Godot Path Generator',
    },
    'output': {
        'dir': 'res://script/gpg',
        'extension': 'cs',
        'namespace': 'GPG',
        'resource_class': 'Res',
    },
    'scripts': {
        'extensions': ['.cs'],
    },
    'resources': {
        'extensions': ['.tscn'],
    },
    'watch': {
        'debounce_ms': 100,
        'ignore_dirs': ['.godot', '.import', '.mono', '.git'],
    },
    'state': {
        'persist': True,
        'file': '.gdpath_state.json',
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """递归合并配置（override 覆盖 base）"""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """配置管理器"""

    def __init__(self, config_path: Optional[str] = None, project_path: Optional[str] = None):
        """
        初始化配置

        Args:
            config_path: 配置文件路径 (可选)
            project_path: Godot 项目根目录，配置文件默认位于其下
        """
        if config_path is None:
            if project_path is None:
                # 尝试从环境变量获取
                project_path = os.environ.get('GDPATH_PROJECT')
                if not project_path:
                    raise ValueError(
                        "必须指定 config_path 或 project_path 参数，或设置 GDPATH_PROJECT 环境变量"
                    )
            config_path = str(Path(project_path) / CONFIG_FILE_NAME)

        self.config_path = Path(config_path)
        self.project_path = Path(project_path) if project_path else self.config_path.parent
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """加载配置文件；文件不存在时使用默认配置"""
        if not self.config_path.exists():
            return copy.deepcopy(DEFAULT_CONFIG)

        with open(self.config_path, 'r', encoding='utf-8') as f:
            loaded = yaml.safe_load(f) or {}

        if not isinstance(loaded, dict):
            raise ValueError(f"配置文件格式错误: {self.config_path}")

        return _merge(DEFAULT_CONFIG, loaded)

    def exists(self) -> bool:
        return self.config_path.exists()

    def get(self, key: str, default: Any = None) -> Any:
        """
        按点分隔的键读取 gdpath.yaml 中的值

        'output.dir' -> config['output']['dir']；任一层缺失或不是映射时返回 default
        """
        node: Any = self._config
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]

        return default if node is None else node

    def set(self, key: str, value: Any) -> None:
        """
        按点分隔的键写入值（只修改内存，调用 save() 落盘）

        中间层缺失或不是映射时用空映射替换，例如 set('watch.debounce_ms', 50)
        """
        *parents, leaf = key.split('.')
        node = self._config
        for part in parents:
            if not isinstance(node.get(part), dict):
                node[part] = {}
            node = node[part]

        node[leaf] = value

    def save(self) -> None:
        """保存配置到文件"""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w', encoding='utf-8') as f:
            yaml.dump(self._config, f, allow_unicode=True, default_flow_style=False, sort_keys=False)

    # 便捷属性访问器
    @property
    def output_dir(self) -> str:
        """生成文件目录（res:// 路径）"""
        return self.get('output.dir', 'res://script/gpg').rstrip('/')

    @property
    def output_extension(self) -> str:
        return self.get('output.extension', 'cs').lstrip('.')

    @property
    def namespace(self) -> str:
        """外层静态类名"""
        return self.get('output.namespace', 'GPG')

    @property
    def resource_class(self) -> str:
        return self.get('output.resource_class', 'Res')

    @property
    def script_extensions(self) -> List[str]:
        """可识别的脚本扩展名"""
        return list(self.get('scripts.extensions', ['.cs']))

    @property
    def resource_extensions(self) -> List[str]:
        """写入 Res 的资源扩展名"""
        return list(self.get('resources.extensions', ['.tscn']))

    @property
    def debounce_seconds(self) -> float:
        return float(self.get('watch.debounce_ms', 100)) / 1000.0

    @property
    def ignore_dirs(self) -> List[str]:
        return list(self.get('watch.ignore_dirs', []))

    @property
    def persist_state(self) -> bool:
        return bool(self.get('state.persist', True))

    @property
    def state_file(self) -> Path:
        """状态文件的绝对路径"""
        return self.project_path / self.get('state.file', '.gdpath_state.json')

    def __repr__(self) -> str:
        return f"Config(path={self.config_path}, output={self.output_dir})"
