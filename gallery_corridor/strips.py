"""Horizontally scrolling image strips used on constrained viewports."""
from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, List, Sequence, Tuple

from .projection import Drawable, translation


@dataclass(frozen=True)
class MarqueeStrip:
    """An endless strip that scrolls its images at a constant rate.

    The content is laid out twice back to back so that when the offset wraps
    after one content width the visible images are unchanged.
    """

    name: str
    images: Tuple[str, ...]
    image_size: float
    period_ms: float
    direction: int
    baseline: float

    @property
    def content_width(self) -> float:
        return len(self.images) * self.image_size

    def offset(self, elapsed_ms: float) -> float:
        """Scroll distance in ``[0, content_width)`` after ``elapsed_ms``."""

        if self.period_ms <= 0 or not self.images:
            return 0.0
        phase = (max(0.0, elapsed_ms) % self.period_ms) / self.period_ms
        return phase * self.content_width

    def positions(self, elapsed_ms: float) -> List[Tuple[str, float]]:
        width = self.content_width
        shift = self.offset(elapsed_ms)
        start = -shift if self.direction < 0 else shift - width
        placed = []
        for copy_index in range(2):
            for index, src in enumerate(self.images):
                placed.append((src, start + copy_index * width + index * self.image_size))
        return placed

    def drawables(self, elapsed_ms: float, hidden: AbstractSet[str] = frozenset()) -> List[Drawable]:
        items = []
        for index, (src, x) in enumerate(self.positions(elapsed_ms)):
            items.append(
                Drawable(
                    kind="strip-image",
                    key=f"{self.name}-{index}",
                    matrix=translation(x, self.baseline, 0.0),
                    width=self.image_size,
                    height=self.image_size,
                    src=src,
                    visible=src not in hidden,
                )
            )
        return items


def build_strips(
    left_images: Sequence[str],
    right_images: Sequence[str],
    *,
    image_size: float,
    period_ms: float,
) -> Tuple[MarqueeStrip, MarqueeStrip]:
    """One strip per wall, scrolling in opposite directions."""

    gap = image_size * 0.6
    upper = MarqueeStrip("upper", tuple(left_images), image_size, period_ms, direction=-1, baseline=-gap)
    lower = MarqueeStrip("lower", tuple(right_images), image_size, period_ms, direction=1, baseline=gap)
    return upper, lower
