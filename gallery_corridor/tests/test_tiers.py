"""Device tier selection tests."""
from __future__ import annotations

import pytest

from gallery_corridor.presentation import CorridorPresentation, StripPresentation
from gallery_corridor.session import GallerySession
from gallery_corridor.tiers import DeviceTier, TierSelector, Viewport, classify_viewport


@pytest.mark.parametrize(
    "width, height, expected",
    [
        (1280, 800, DeviceTier.FULL_3D),
        (768, 700, DeviceTier.FULL_3D),
        (767, 500, DeviceTier.SIMPLIFIED_2D),
        (1024, 1366, DeviceTier.SIMPLIFIED_2D),
        (375, 812, DeviceTier.SIMPLIFIED_2D),
    ],
)
def test_classify_viewport(width: int, height: int, expected: DeviceTier) -> None:
    assert classify_viewport(Viewport(width, height), 768) is expected


def test_selector_reports_only_real_changes() -> None:
    changes = []
    selector = TierSelector(768, on_change=lambda tier, viewport: changes.append((tier, viewport)))
    selector.evaluate(1280, 800)
    selector.evaluate(1280, 800)
    selector.evaluate(1440, 900)
    selector.evaluate(375, 812)
    assert [tier for tier, _ in changes] == [DeviceTier.FULL_3D, DeviceTier.SIMPLIFIED_2D]


# //1.- Identical dimensions produce the identical tier and presentation.
def test_tier_idempotence_keeps_geometry(settings) -> None:
    session = GallerySession(settings, viewport=(1280, 800))
    presentation = session.presentation
    assert session.resize(1280, 800) is DeviceTier.FULL_3D
    assert session.presentation is presentation
    assert session.rebuilds == 1


def test_full_tier_uses_three_copies_and_lights(settings) -> None:
    session = GallerySession(settings, viewport=(1280, 800))
    presentation = session.presentation
    assert isinstance(presentation, CorridorPresentation)
    assert presentation.geometry.copies == 3
    assert len(presentation.geometry.lights) == 21


# //2.- Constrained viewports swap to the strip presentation, and back.
def test_simplified_tier_switches_to_strips(settings) -> None:
    session = GallerySession(settings, viewport=(1280, 800))
    session.resize(375, 812)
    assert session.tier is DeviceTier.SIMPLIFIED_2D
    assert isinstance(session.presentation, StripPresentation)
    session.resize(1280, 800)
    assert isinstance(session.presentation, CorridorPresentation)
    assert session.rebuilds == 3


def test_simplified_corridor_mode_uses_two_copies(corridor_settings) -> None:
    session = GallerySession(corridor_settings, viewport=(375, 812))
    presentation = session.presentation
    assert isinstance(presentation, CorridorPresentation)
    assert presentation.geometry.copies == 2
    assert presentation.geometry.lights == ()
    assert presentation.stage_scale == pytest.approx(1.9)


def test_stage_scale_updates_without_rebuild(corridor_settings) -> None:
    session = GallerySession(corridor_settings, viewport=(700, 500))
    assert session.presentation.stage_scale == 1.0
    session.resize(500, 700)
    assert session.rebuilds == 1
    assert session.presentation.stage_scale == pytest.approx(1.9)
