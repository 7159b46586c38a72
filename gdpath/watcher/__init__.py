"""
gdpath - 监听模块

Orchestrator 与 watchdog 事件桥接
"""

from .orchestrator import Orchestrator
from .observer import ProjectEventHandler, ProjectWatcher

__all__ = [
    'Orchestrator',
    'ProjectEventHandler',
    'ProjectWatcher',
]
