"""
跟踪状态

- scripts: 脚本路径 -> 类名
- resources: 已写入 Res 的资源路径

状态只存在于内存中；可选地保存到项目下的 .gdpath_state.json，
重启后重新加载。
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Set

STATE_VERSION = "1.0"


@dataclass
class TrackerState:
    """跟踪状态"""

    scripts: Dict[str, str] = field(default_factory=dict)
    resources: Set[str] = field(default_factory=set)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": STATE_VERSION,
            "updated_at": datetime.now().isoformat(),
            "scripts": dict(sorted(self.scripts.items())),
            "resources": sorted(self.resources),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrackerState":
        return cls(
            scripts=dict(data.get("scripts", {})),
            resources=set(data.get("resources", [])),
        )

    def save(self, state_file: Path) -> None:
        """保存状态文件"""
        state_file = Path(state_file)
        state_file.parent.mkdir(parents=True, exist_ok=True)
        with open(state_file, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    @classmethod
    def load(cls, state_file: Path) -> Optional["TrackerState"]:
        """
        加载状态文件

        Returns:
            状态；文件不存在时返回 None

        Raises:
            ValueError: 文件内容不是合法的状态
        """
        state_file = Path(state_file)
        if not state_file.exists():
            return None

        with open(state_file, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"状态文件损坏: {state_file}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"状态文件格式错误: {state_file}")

        return cls.from_dict(data)
