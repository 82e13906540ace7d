"""Rendering strategies, one per device tier."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AbstractSet, Dict, List, Tuple

from .camera import CameraState
from .geometry import CorridorGeometry, build_corridor_geometry
from .layout import SceneLayout
from .projection import CorridorDimensions, Drawable, MatrixProjectionRenderer, translation
from .settings import CorridorSettings, TierSettings
from .strips import MarqueeStrip, build_strips
from .tiers import DeviceTier


class Presentation(ABC):
    """Built once per tier change; asked for drawables every frame."""

    tier: DeviceTier

    @abstractmethod
    def scene(self) -> Dict[str, object]:
        """Static, JSON friendly description of what this presentation shows."""

    @abstractmethod
    def draw(
        self,
        state: CameraState,
        perspective: float,
        elapsed_ms: float,
        hidden: AbstractSet[str] = frozenset(),
    ) -> List[Drawable]:
        """Drawables for the current frame."""

    def set_stage_scale(self, stage_scale: float) -> None:
        return None


class CorridorPresentation(Presentation):
    def __init__(
        self,
        tier: DeviceTier,
        layout: SceneLayout,
        corridor: CorridorSettings,
        *,
        copies: int,
        with_lights: bool,
        stage_scale: float = 1.0,
    ) -> None:
        self.tier = tier
        self.geometry: CorridorGeometry = build_corridor_geometry(
            layout,
            copies,
            width=corridor.corridor_width,
            height=corridor.corridor_height,
            with_lights=with_lights,
        )
        self._renderer = MatrixProjectionRenderer(
            CorridorDimensions(
                width=corridor.corridor_width,
                height=corridor.corridor_height,
                framed_size=corridor.framed_size,
                painting_lift=corridor.painting_lift,
                stage_scale=stage_scale,
            )
        )

    @property
    def stage_scale(self) -> float:
        return self._renderer.dimensions.stage_scale

    def set_stage_scale(self, stage_scale: float) -> None:
        if stage_scale != self.stage_scale:
            self._renderer = self._renderer.with_stage_scale(stage_scale)

    def scene(self) -> Dict[str, object]:
        geometry = self.geometry
        corridor_length = geometry.corridor_length
        return {
            "mode": "corridor",
            "tier": self.tier.value,
            "copies": geometry.copies,
            "loopLength": geometry.loop_length,
            "corridorLength": corridor_length,
            "cameraOrigin": geometry.camera_origin,
            "stageScale": self.stage_scale,
            "surfaces": [
                {"name": surface.name, "span": surface.span, "length": surface.length}
                for surface in geometry.surfaces
            ],
            "lights": [light.depth for light in geometry.lights],
            "artworks": [
                {
                    "leftSrc": artwork.left_src,
                    "rightSrc": artwork.right_src,
                    "leftTilt": artwork.left_tilt,
                    "rightTilt": artwork.right_tilt,
                    "depth": artwork.depth,
                    "rightWallX": artwork.right_wall_coordinate(corridor_length),
                }
                for artwork in geometry.artworks
            ],
        }

    def draw(
        self,
        state: CameraState,
        perspective: float,
        elapsed_ms: float,
        hidden: AbstractSet[str] = frozenset(),
    ) -> List[Drawable]:
        return self._renderer.render(self.geometry, state, perspective, hidden=hidden)


class StripPresentation(Presentation):
    """Two opposing marquee strips over a looping background video."""

    def __init__(self, layout: SceneLayout, tiers: TierSettings, background_video: str) -> None:
        self.tier = DeviceTier.SIMPLIFIED_2D
        left = [row.left_image for row in layout.rows]
        right = [row.right_image for row in layout.rows]
        self.strips: Tuple[MarqueeStrip, MarqueeStrip] = build_strips(
            left,
            right,
            image_size=tiers.strip_image_size,
            period_ms=tiers.strip_period_ms,
        )
        self.background_video = background_video

    def _video(self, hidden: AbstractSet[str]) -> Drawable:
        return Drawable(
            kind="video",
            key="background",
            matrix=translation(0.0, 0.0, 0.0),
            src=self.background_video,
            visible=bool(self.background_video) and self.background_video not in hidden,
            attributes={"loop": True, "muted": True, "autoplay": True, "controls": False},
        )

    def scene(self) -> Dict[str, object]:
        return {
            "mode": "strips",
            "tier": self.tier.value,
            "backgroundVideo": self.background_video,
            "strips": [
                {
                    "name": strip.name,
                    "images": list(strip.images),
                    "direction": strip.direction,
                    "periodMs": strip.period_ms,
                    "contentWidth": strip.content_width,
                }
                for strip in self.strips
            ],
        }

    def draw(
        self,
        state: CameraState,
        perspective: float,
        elapsed_ms: float,
        hidden: AbstractSet[str] = frozenset(),
    ) -> List[Drawable]:
        drawables = [self._video(hidden)]
        for strip in self.strips:
            drawables.extend(strip.drawables(elapsed_ms, hidden))
        return drawables


def build_presentation(
    tier: DeviceTier,
    layout: SceneLayout,
    corridor: CorridorSettings,
    tiers: TierSettings,
    *,
    background_video: str = "",
    stage_scale: float = 1.0,
) -> Presentation:
    if tier is DeviceTier.FULL_3D:
        return CorridorPresentation(tier, layout, corridor, copies=tiers.full_copies, with_lights=True)
    if tiers.simplified_mode == "strips":
        return StripPresentation(layout, tiers, background_video)
    return CorridorPresentation(
        tier,
        layout,
        corridor,
        copies=tiers.simplified_copies,
        with_lights=False,
        stage_scale=stage_scale,
    )
