"""Viewport classification into rendering tiers."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

LOGGER = logging.getLogger(__name__)


class DeviceTier(Enum):
    FULL_3D = "full_3d"
    SIMPLIFIED_2D = "simplified_2d"


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int

    @property
    def is_portrait(self) -> bool:
        return self.height > self.width


def classify_viewport(viewport: Viewport, narrow_width: int) -> DeviceTier:
    if viewport.width < narrow_width or viewport.is_portrait:
        return DeviceTier.SIMPLIFIED_2D
    return DeviceTier.FULL_3D


def stage_scale_for(viewport: Viewport, portrait_scale: float) -> float:
    """Portrait screens enlarge the whole stage so artwork keeps its proportions."""

    return portrait_scale if viewport.is_portrait else 1.0


TierListener = Callable[[DeviceTier, Viewport], None]


class TierSelector:
    """Re-evaluates the tier on every resize and reports only real changes."""

    def __init__(self, narrow_width: int, on_change: Optional[TierListener] = None) -> None:
        self._narrow_width = narrow_width
        self._on_change = on_change
        self._viewport: Optional[Viewport] = None
        self._tier: Optional[DeviceTier] = None

    @property
    def tier(self) -> Optional[DeviceTier]:
        return self._tier

    @property
    def viewport(self) -> Optional[Viewport]:
        return self._viewport

    def evaluate(self, width: int, height: int) -> DeviceTier:
        viewport = Viewport(int(width), int(height))
        if viewport == self._viewport and self._tier is not None:
            return self._tier
        self._viewport = viewport
        tier = classify_viewport(viewport, self._narrow_width)
        if tier is not self._tier:
            LOGGER.info("Viewport %sx%s selects tier %s", viewport.width, viewport.height, tier.value)
            self._tier = tier
            if self._on_change is not None:
                self._on_change(tier, viewport)
        return tier
