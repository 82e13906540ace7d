"""Projection of corridor geometry into drawable transforms.

Renderers only need the placed geometry, the camera state and the current
perspective distance. ``MatrixProjectionRenderer`` is the reference
implementation: it emits one 4x4 homogeneous transform per surface, light
and artwork in a y-up, camera-relative space where points ahead of the
camera have negative z. ``css_matrix3d`` formats a transform for a DOM
renderer.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import AbstractSet, Dict, List, Optional, Protocol, Sequence

import numpy as np

from .camera import CameraState
from .geometry import CorridorGeometry


def translation(x: float, y: float, z: float) -> np.ndarray:
    matrix = np.eye(4, dtype=float)
    matrix[:3, 3] = (x, y, z)
    return matrix


def scaling(x: float, y: float, z: float) -> np.ndarray:
    return np.diag([x, y, z, 1.0])


def rotation_x(degrees: float) -> np.ndarray:
    c, s = math.cos(math.radians(degrees)), math.sin(math.radians(degrees))
    matrix = np.eye(4, dtype=float)
    matrix[1:3, 1:3] = ((c, -s), (s, c))
    return matrix


def rotation_y(degrees: float) -> np.ndarray:
    c, s = math.cos(math.radians(degrees)), math.sin(math.radians(degrees))
    matrix = np.eye(4, dtype=float)
    matrix[0, 0], matrix[0, 2] = c, s
    matrix[2, 0], matrix[2, 2] = -s, c
    return matrix


def rotation_z(degrees: float) -> np.ndarray:
    c, s = math.cos(math.radians(degrees)), math.sin(math.radians(degrees))
    matrix = np.eye(4, dtype=float)
    matrix[0:2, 0:2] = ((c, -s), (s, c))
    return matrix


def view_matrix(eye_depth: float, stage_scale: float = 1.0) -> np.ndarray:
    """Map world depth ``z`` to camera space ``eye_depth - z``."""

    return scaling(stage_scale, stage_scale, stage_scale) @ translation(0.0, 0.0, eye_depth) @ scaling(1.0, 1.0, -1.0)


def css_matrix3d(matrix: np.ndarray) -> str:
    """Format a transform as a CSS ``matrix3d`` (column-major) string."""

    values = ",".join(f"{value:.6g}" for value in np.asarray(matrix, dtype=float).flatten(order="F"))
    return f"matrix3d({values})"


@dataclass
class Drawable:
    kind: str
    key: str
    matrix: np.ndarray
    width: float = 0.0
    height: float = 0.0
    src: Optional[str] = None
    visible: bool = True
    attributes: Dict[str, object] = field(default_factory=dict)

    def to_payload(self) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "kind": self.kind,
            "key": self.key,
            "transform": css_matrix3d(self.matrix),
            "width": self.width,
            "height": self.height,
            "visible": self.visible,
        }
        if self.src is not None:
            payload["src"] = self.src
        if self.attributes:
            payload["attributes"] = dict(self.attributes)
        return payload


class ProjectionRenderer(Protocol):
    """Anything that turns corridor geometry plus a camera into drawables."""

    def render(
        self,
        geometry: CorridorGeometry,
        state: CameraState,
        perspective: float,
        *,
        hidden: AbstractSet[str] = frozenset(),
    ) -> Sequence[Drawable]:
        ...


@dataclass(frozen=True)
class CorridorDimensions:
    width: float
    height: float
    framed_size: float
    painting_lift: float = 0.0
    stage_scale: float = 1.0


class MatrixProjectionRenderer:
    """Reference renderer producing numpy transforms for every corridor element."""

    def __init__(self, dimensions: CorridorDimensions) -> None:
        self._dims = dimensions

    @property
    def dimensions(self) -> CorridorDimensions:
        return self._dims

    def with_stage_scale(self, stage_scale: float) -> "MatrixProjectionRenderer":
        dims = self._dims
        return MatrixProjectionRenderer(
            CorridorDimensions(dims.width, dims.height, dims.framed_size, dims.painting_lift, stage_scale)
        )

    def _surface_model(self, name: str, lateral: float, vertical: float, length: float) -> np.ndarray:
        centre = translation(lateral, vertical, length / 2.0)
        if name == "floor":
            return centre @ rotation_x(-90.0)
        if name == "ceiling":
            return centre @ rotation_x(90.0)
        if name == "left_wall":
            return centre @ rotation_y(90.0)
        return centre @ rotation_y(-90.0)

    def render(
        self,
        geometry: CorridorGeometry,
        state: CameraState,
        perspective: float,
        *,
        hidden: AbstractSet[str] = frozenset(),
    ) -> List[Drawable]:
        dims = self._dims
        view = view_matrix(geometry.eye_depth(state.position), dims.stage_scale)
        drawables: List[Drawable] = []
        for surface in geometry.surfaces:
            model = self._surface_model(surface.name, surface.lateral, surface.vertical, surface.length)
            drawables.append(
                Drawable(
                    kind="surface",
                    key=surface.name,
                    matrix=view @ model,
                    width=surface.span,
                    height=surface.length,
                    attributes={"perspective": perspective},
                )
            )
        ceiling_y = dims.height / 2.0
        for index, light in enumerate(geometry.lights):
            model = translation(0.0, ceiling_y, light.depth) @ rotation_x(90.0)
            drawables.append(Drawable(kind="light", key=f"light-{index}", matrix=view @ model, width=100.0, height=16.0))
        half_width = dims.width / 2.0
        for index, artwork in enumerate(geometry.artworks):
            left = translation(-half_width, dims.painting_lift, artwork.depth) @ rotation_y(90.0) @ rotation_z(artwork.left_tilt)
            right = translation(half_width, dims.painting_lift, artwork.depth) @ rotation_y(-90.0) @ rotation_z(artwork.right_tilt)
            drawables.append(
                Drawable(
                    kind="artwork",
                    key=f"left-{index}",
                    matrix=view @ left,
                    width=dims.framed_size,
                    height=dims.framed_size,
                    src=artwork.left_src,
                    visible=artwork.left_src not in hidden,
                )
            )
            drawables.append(
                Drawable(
                    kind="artwork",
                    key=f"right-{index}",
                    matrix=view @ right,
                    width=dims.framed_size,
                    height=dims.framed_size,
                    src=artwork.right_src,
                    visible=artwork.right_src not in hidden,
                )
            )
        return drawables
