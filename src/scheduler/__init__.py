from __future__ import annotations

from typing import Dict, Type

from .interface import CabinTarget, Direction, HallTarget, Target, TargetSelector
from .look import LookTargetSelector
from .nearest import NearestTargetSelector
from .requests import RequestBook, is_valid_call
from .scan import ScanTargetSelector
from .utils import FLOOR_EPSILON, same_target

__all__ = [
    "CabinTarget",
    "Direction",
    "FLOOR_EPSILON",
    "HallTarget",
    "LookTargetSelector",
    "NearestTargetSelector",
    "RequestBook",
    "ScanTargetSelector",
    "Target",
    "TargetSelector",
    "get_selector",
    "is_valid_call",
    "same_target",
]


SELECTOR_REGISTRY: Dict[str, Type[TargetSelector]] = {
    "scan": ScanTargetSelector,
    "look": LookTargetSelector,
    "nearest": NearestTargetSelector,
}


def get_selector(name: str, **kwargs) -> TargetSelector:
    cls = SELECTOR_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown selector '{name}'. Available: {', '.join(SELECTOR_REGISTRY)}")
    return cls(**kwargs)
