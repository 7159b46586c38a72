"""
变更去抖

同一个场景根节点在短时间内的重复触发只处理一次
"""

import time
from typing import Optional


class ChangeDebouncer:
    """
    单槽位去抖器

    记录最近一次放行的 (根节点名, 时间戳)。使用单调时钟计算真实的时间差。

    示例：
        debouncer = ChangeDebouncer(threshold=0.1)
        debouncer.should_process("Main", now=10.00)  # True
        debouncer.should_process("Main", now=10.05)  # False
        debouncer.should_process("Main", now=10.20)  # True
    """

    def __init__(self, threshold: float = 0.1):
        """
        Args:
            threshold: 去抖窗口（秒）
        """
        self.threshold = threshold
        self.last_root: Optional[str] = None
        self.last_timestamp: Optional[float] = None

    def should_process(self, root_name: str, now: Optional[float] = None) -> bool:
        """
        判断本次触发是否需要处理

        放行时立即记录 (root_name, now)，无论之后的生成是否成功

        Args:
            root_name: 场景根节点名
            now: 当前时间（秒，单调时钟）；默认 time.monotonic()

        Returns:
            False 表示跳过
        """
        if now is None:
            now = time.monotonic()

        if (
            root_name == self.last_root
            and self.last_timestamp is not None
            and now - self.last_timestamp < self.threshold
        ):
            return False

        self.last_root = root_name
        self.last_timestamp = now
        return True

    def reset(self) -> None:
        self.last_root = None
        self.last_timestamp = None

    def __repr__(self) -> str:
        return f"ChangeDebouncer(threshold={self.threshold}, last_root={self.last_root!r})"
