"""Pytest configuration for gallery corridor tests."""
from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest

# //1.- Ensure repository root is available on the Python path for package imports.
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gallery_corridor.settings import GallerySettings, load_gallery_settings  # noqa: E402

CATALOG_14 = tuple(f"/cuadro{index}.png" for index in range(1, 15))


# //2.- Bundled settings shrunk to the seven-row scenario used across tests.
@pytest.fixture()
def settings() -> GallerySettings:
    bundled = load_gallery_settings()
    return replace(
        bundled,
        corridor=replace(bundled.corridor, row_count=7),
        assets=replace(bundled.assets, catalog=CATALOG_14),
    )


@pytest.fixture()
def corridor_settings(settings: GallerySettings) -> GallerySettings:
    return replace(settings, tiers=replace(settings.tiers, simplified_mode="corridor"))
