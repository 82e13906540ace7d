"""Row layout generation for the gallery corridor.

A layout is the ordered list of artwork rows that makes up one loop of the
corridor. It is generated once per session and never mutated afterwards;
regenerating it mid-walk would break the illusion of a single continuous
space.
"""
from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .errors import LayoutError

DEFAULT_MAX_TILT_DEG = 2.0


class LayoutPolicy(Enum):
    RANDOMIZED = "randomized"
    FIXED = "fixed"


@dataclass(frozen=True)
class RowUnit:
    """A matched left/right pair of artworks plus their tilt perturbations."""

    left_image: str
    right_image: str
    left_tilt: float
    right_tilt: float


@dataclass(frozen=True)
class SceneLayout:
    rows: Tuple[RowUnit, ...]
    row_depth: float

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def loop_length(self) -> float:
        return self.row_count * self.row_depth

    def images(self) -> Tuple[str, ...]:
        """Every image reference in row order, left before right."""

        refs: List[str] = []
        for row in self.rows:
            refs.extend((row.left_image, row.right_image))
        return tuple(refs)


def _validate(catalog: Sequence[str], row_count: int) -> None:
    if not catalog:
        raise LayoutError("Image catalog must contain at least one reference")
    if row_count < 1:
        raise LayoutError("Row count must be at least one")


def build_pool(catalog: Sequence[str], slots: int) -> List[str]:
    """Repeat ``catalog`` until the pool covers ``slots`` entries."""

    pool: List[str] = []
    while len(pool) < slots:
        pool.extend(catalog)
    return pool


def fisher_yates(pool: List[str], rng: random.Random) -> None:
    """Shuffle ``pool`` in place so every permutation is equally likely."""

    for i in range(len(pool) - 1, 0, -1):
        j = rng.randrange(i + 1)
        pool[i], pool[j] = pool[j], pool[i]


def _random_tilt(rng: random.Random, max_tilt: float) -> float:
    return (rng.random() - 0.5) * 2.0 * max_tilt


def randomized_rows(
    catalog: Sequence[str],
    row_count: int,
    rng: Optional[random.Random] = None,
    *,
    max_tilt: float = DEFAULT_MAX_TILT_DEG,
) -> Tuple[RowUnit, ...]:
    """Shuffle a repeated pool of the catalog and pair consecutive entries."""

    _validate(catalog, row_count)
    source = rng or random.Random()
    pool = build_pool(catalog, row_count * 2)
    fisher_yates(pool, source)
    rows = []
    for index in range(row_count):
        rows.append(
            RowUnit(
                left_image=pool[index * 2],
                right_image=pool[index * 2 + 1],
                left_tilt=_random_tilt(source, max_tilt),
                right_tilt=_random_tilt(source, max_tilt),
            )
        )
    return tuple(rows)


def fixed_tilt(index: int, max_tilt: float = DEFAULT_MAX_TILT_DEG) -> Tuple[float, float]:
    """Deterministic left/right tilt for the row at ``index``."""

    return (
        max_tilt * math.sin(index * 1.7),
        -max_tilt * math.cos(index * 2.3),
    )


def fixed_rows(
    catalog: Sequence[str],
    row_count: int,
    *,
    max_tilt: float = DEFAULT_MAX_TILT_DEG,
) -> Tuple[RowUnit, ...]:
    """Pair catalog images in their original order.

    Indexes wrap around the catalog, so an odd-length catalog pairs its last
    image with the first one.
    """

    _validate(catalog, row_count)
    size = len(catalog)
    rows = []
    for index in range(row_count):
        left_tilt, right_tilt = fixed_tilt(index, max_tilt)
        rows.append(
            RowUnit(
                left_image=catalog[(index * 2) % size],
                right_image=catalog[(index * 2 + 1) % size],
                left_tilt=left_tilt,
                right_tilt=right_tilt,
            )
        )
    return tuple(rows)


def generate_layout(
    catalog: Sequence[str],
    row_count: int,
    row_depth: float,
    *,
    policy: LayoutPolicy | str = LayoutPolicy.RANDOMIZED,
    rng: Optional[random.Random] = None,
    max_tilt: float = DEFAULT_MAX_TILT_DEG,
) -> SceneLayout:
    if row_depth <= 0:
        raise LayoutError("Row depth must be positive")
    try:
        resolved = LayoutPolicy(policy)
    except ValueError as exc:
        raise LayoutError(f"Unknown layout policy {policy!r}") from exc
    if resolved is LayoutPolicy.RANDOMIZED:
        rows = randomized_rows(catalog, row_count, rng, max_tilt=max_tilt)
    else:
        rows = fixed_rows(catalog, row_count, max_tilt=max_tilt)
    return SceneLayout(rows=rows, row_depth=float(row_depth))
