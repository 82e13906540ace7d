"""Data structures describing the replicated corridor geometry."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .errors import GeometryError
from .layout import SceneLayout


@dataclass(frozen=True)
class PlacedArtwork:
    """A row of the layout expanded into world space."""

    left_src: str
    right_src: str
    left_tilt: float
    right_tilt: float
    depth: float
    copy_index: int
    row_index: int

    def right_wall_coordinate(self, corridor_length: float) -> float:
        """Position along the right wall, whose local axis runs backwards."""

        return corridor_length - self.depth


@dataclass(frozen=True)
class SurfacePlacement:
    """A flat surface spanning the whole corridor along the travel axis."""

    name: str
    span: float
    length: float
    lateral: float
    vertical: float


@dataclass(frozen=True)
class CeilingLight:
    depth: float


@dataclass(frozen=True)
class CorridorGeometry:
    artworks: Tuple[PlacedArtwork, ...]
    surfaces: Tuple[SurfacePlacement, ...]
    lights: Tuple[CeilingLight, ...]
    copies: int
    loop_length: float
    row_depth: float
    camera_origin: float

    @property
    def corridor_length(self) -> float:
        return self.loop_length * self.copies

    def eye_depth(self, position: float) -> float:
        """World depth of the camera for a loop-relative ``position``."""

        return self.camera_origin + position

    def surface(self, name: str) -> SurfacePlacement:
        for surface in self.surfaces:
            if surface.name == name:
                return surface
        raise KeyError(name)


def camera_start_copy(copies: int) -> int:
    """Copy index the camera travels through.

    With three or more copies this is a non-edge copy, so artwork is visible
    both ahead and behind. With two copies the camera stays in copy 0 and
    keeps a full loop ahead of it.
    """

    return (copies - 1) // 2


def place_artworks(layout: SceneLayout, copies: int) -> Tuple[PlacedArtwork, ...]:
    placed: List[PlacedArtwork] = []
    loop_length = layout.loop_length
    half_row = layout.row_depth / 2.0
    for copy_index in range(copies):
        for row_index, row in enumerate(layout.rows):
            depth = copy_index * loop_length + row_index * layout.row_depth + half_row
            placed.append(
                PlacedArtwork(
                    left_src=row.left_image,
                    right_src=row.right_image,
                    left_tilt=row.left_tilt,
                    right_tilt=row.right_tilt,
                    depth=depth,
                    copy_index=copy_index,
                    row_index=row_index,
                )
            )
    return tuple(placed)


def build_surfaces(corridor_length: float, width: float, height: float) -> Tuple[SurfacePlacement, ...]:
    return (
        SurfacePlacement("floor", span=width, length=corridor_length, lateral=0.0, vertical=-height / 2.0),
        SurfacePlacement("ceiling", span=width, length=corridor_length, lateral=0.0, vertical=height / 2.0),
        SurfacePlacement("left_wall", span=height, length=corridor_length, lateral=-width / 2.0, vertical=0.0),
        SurfacePlacement("right_wall", span=height, length=corridor_length, lateral=width / 2.0, vertical=0.0),
    )


def build_corridor_geometry(
    layout: SceneLayout,
    copies: int,
    *,
    width: float,
    height: float,
    with_lights: bool = True,
) -> CorridorGeometry:
    if copies < 1:
        raise GeometryError("Corridor needs at least one copy of the loop")
    artworks = place_artworks(layout, copies)
    corridor_length = layout.loop_length * copies
    lights = tuple(CeilingLight(artwork.depth) for artwork in artworks) if with_lights else ()
    return CorridorGeometry(
        artworks=artworks,
        surfaces=build_surfaces(corridor_length, width, height),
        lights=lights,
        copies=copies,
        loop_length=layout.loop_length,
        row_depth=layout.row_depth,
        camera_origin=camera_start_copy(copies) * layout.loop_length,
    )
