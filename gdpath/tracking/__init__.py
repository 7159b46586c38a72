"""
gdpath - 跟踪模块

去抖、跟踪状态与增删改同步
"""

from .debouncer import ChangeDebouncer
from .state import TrackerState
from .tracker import GenerationTracker

__all__ = [
    'ChangeDebouncer',
    'TrackerState',
    'GenerationTracker',
]
