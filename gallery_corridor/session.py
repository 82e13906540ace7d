"""Per-session wiring of layout, camera, input and tier selection."""
from __future__ import annotations

import logging
import queue
import random
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from .camera import CameraLoop, CameraParams, CameraState
from .controls import BoostParams, InputController
from .events import RESIZE, WHEEL, EventHub, ResizeEvent, WheelEvent
from .layout import SceneLayout, generate_layout
from .preload import PreloadReport
from .presentation import Presentation, build_presentation
from .projection import Drawable
from .settings import GallerySettings, SessionSeeds
from .tiers import DeviceTier, TierSelector, Viewport, stage_scale_for

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreloadFinished:
    report: PreloadReport


@dataclass(frozen=True)
class FrameSnapshot:
    """Immutable view of one frame, safe to hand to other threads."""

    index: int
    camera: CameraState
    tier: Optional[DeviceTier]
    perspective: float
    sphere_rotation: float
    stage_scale: float
    elapsed_ms: float
    revealed: bool

    def to_payload(self) -> Dict[str, object]:
        return {
            "frame": self.index,
            "position": self.camera.position,
            "totalDistance": self.camera.total_distance,
            "speedMultiplier": self.camera.speed_multiplier,
            "tier": self.tier.value if self.tier is not None else None,
            "perspective": self.perspective,
            "sphereRotation": self.sphere_rotation,
            "stageScale": self.stage_scale,
            "elapsedMs": self.elapsed_ms,
            "revealed": self.revealed,
        }


class GallerySession:
    """Owns every piece of mutable state for one walk through the gallery.

    All mutation happens on the thread that calls :meth:`frame`; other
    threads hand signals over through :meth:`post`.
    """

    def __init__(
        self,
        settings: GallerySettings,
        *,
        seeds: Optional[SessionSeeds] = None,
        layout_rng: Optional[random.Random] = None,
        camera_rng: Optional[random.Random] = None,
        viewport: Optional[Tuple[int, int]] = None,
    ) -> None:
        generators = (seeds or SessionSeeds()).create_generators()
        corridor = settings.corridor
        self.settings = settings
        self.layout: SceneLayout = generate_layout(
            settings.assets.catalog,
            corridor.row_count,
            corridor.row_depth,
            policy=corridor.layout_policy,
            rng=layout_rng or generators["layout"],
            max_tilt=corridor.max_tilt_deg,
        )
        self.camera = CameraLoop.at_random_row(
            self.layout.row_count,
            self.layout.row_depth,
            CameraParams.from_settings(settings.camera),
            camera_rng or generators["camera"],
        )
        self.controls = InputController(
            self.camera,
            BoostParams(step=settings.camera.boost_step, cap=settings.camera.boost_cap),
        )
        self.selector = TierSelector(settings.tiers.narrow_width, on_change=self._switch_tier)
        self.presentation: Optional[Presentation] = None
        self.hidden: Set[str] = set()
        self._hidden_view: FrozenSet[str] = frozenset()
        self.revealed = False
        self.rebuilds = 0
        self._stage_scale = 1.0
        self._inbox: "queue.Queue[object]" = queue.Queue()
        self._hub: Optional[EventHub] = None
        self._first_frame_ms: Optional[float] = None
        self._frame_index = 0
        self._snapshot = self._make_snapshot(0.0)
        self._published_scene = self.scene()
        if viewport is not None:
            self.resize(*viewport)

    # //1.- Tier handling: presentations are rebuilt only when the tier flips.
    def _switch_tier(self, tier: DeviceTier, viewport: Viewport) -> None:
        tiers = self.settings.tiers
        self._stage_scale = stage_scale_for(viewport, tiers.portrait_stage_scale)
        self.presentation = build_presentation(
            tier,
            self.layout,
            self.settings.corridor,
            tiers,
            background_video=self.settings.assets.background_video,
            stage_scale=self._stage_scale,
        )
        self.rebuilds += 1
        self._published_scene = self.scene()

    @property
    def tier(self) -> Optional[DeviceTier]:
        return self.selector.tier

    def resize(self, width: int, height: int) -> DeviceTier:
        tier = self.selector.evaluate(width, height)
        viewport = self.selector.viewport
        if viewport is None or self.presentation is None:
            return tier
        stage_scale = stage_scale_for(viewport, self.settings.tiers.portrait_stage_scale)
        if stage_scale != self._stage_scale:
            self._stage_scale = stage_scale
            self.presentation.set_stage_scale(stage_scale)
            self._published_scene = self.scene()
        return tier

    def wheel(self, event: WheelEvent) -> WheelEvent:
        self.controls.handle_wheel(event)
        return event

    def _on_resize(self, event: object) -> None:
        if isinstance(event, ResizeEvent):
            self.resize(event.width, event.height)

    def _on_wheel(self, event: object) -> None:
        if isinstance(event, WheelEvent):
            self.wheel(event)

    # //2.- Listener registration mirrors unregistration exactly.
    def attach(self, hub: EventHub) -> None:
        if self._hub is not None:
            raise RuntimeError("Session already attached to an event source")
        hub.add_listener(WHEEL, self._on_wheel)
        hub.add_listener(RESIZE, self._on_resize)
        self._hub = hub

    def detach(self) -> None:
        hub = self._hub
        if hub is None:
            return
        hub.remove_listener(WHEEL, self._on_wheel)
        hub.remove_listener(RESIZE, self._on_resize)
        self._hub = None

    # //3.- Cross-thread hand-off, drained at the start of every frame.
    def post(self, event: object) -> None:
        self._inbox.put(event)

    def pump_events(self) -> int:
        handled = 0
        while True:
            try:
                event = self._inbox.get_nowait()
            except queue.Empty:
                return handled
            handled += 1
            if isinstance(event, WheelEvent):
                self.wheel(event)
            elif isinstance(event, ResizeEvent):
                self.resize(event.width, event.height)
            elif isinstance(event, PreloadFinished):
                self.apply_preload(event.report)
            else:
                LOGGER.debug("Dropping unknown event %r", event)

    def apply_preload(self, report: PreloadReport) -> None:
        """Hide broken assets and reveal the gallery, complete or not."""

        self.hidden.update(report.failed)
        self._hidden_view = frozenset(self.hidden)
        if not self.revealed:
            LOGGER.info(
                "Revealing gallery (%d loaded, %d failed, %d still pending)",
                len(report.loaded),
                len(report.failed),
                len(report.pending),
            )
        self.revealed = True
        self._published_scene = self.scene()

    def asset_refs(self) -> List[str]:
        return list(dict.fromkeys(self.layout.images()))

    # //4.- Per-frame work: drain signals, advance the camera, publish a snapshot.
    def _make_snapshot(self, elapsed_ms: float) -> FrameSnapshot:
        return FrameSnapshot(
            index=self._frame_index,
            camera=self.camera.state(),
            tier=self.selector.tier,
            perspective=self.camera.perspective,
            sphere_rotation=self.camera.sphere_rotation,
            stage_scale=self._stage_scale,
            elapsed_ms=elapsed_ms,
            revealed=self.revealed,
        )

    def frame(self, now_ms: float) -> FrameSnapshot:
        self.pump_events()
        if self._first_frame_ms is None:
            self._first_frame_ms = now_ms
        self.camera.frame(now_ms)
        self._frame_index += 1
        self._snapshot = self._make_snapshot(now_ms - self._first_frame_ms)
        return self._snapshot

    @property
    def snapshot(self) -> FrameSnapshot:
        return self._snapshot

    def draw(self, snapshot: Optional[FrameSnapshot] = None) -> List[Drawable]:
        current = snapshot or self._snapshot
        presentation = self.presentation
        if presentation is None:
            return []
        return presentation.draw(current.camera, current.perspective, current.elapsed_ms, self._hidden_view)

    def scene(self) -> Dict[str, object]:
        assets = self.settings.assets
        return {
            "revealed": self.revealed,
            "hidden": sorted(self.hidden),
            "presentation": self.presentation.scene() if self.presentation is not None else None,
            "callToAction": {
                "href": assets.link_target,
                "target": "_blank",
                "rel": "noopener noreferrer",
                "lines": list(assets.cta_lines),
            },
        }

    @property
    def published_scene(self) -> Dict[str, object]:
        """Scene payload as of the last change, safe to read from other threads."""

        return self._published_scene

    def frame_payload(self) -> Dict[str, object]:
        """Drawables for the latest snapshot, as served to the DOM renderer."""

        snapshot = self._snapshot
        return {
            "frame": snapshot.index,
            "drawables": [drawable.to_payload() for drawable in self.draw(snapshot)],
        }
