"""Gallery corridor package.

Simulation core for an endless first-person walk through a gallery
corridor: row layout generation, replicated corridor geometry, the camera
loop, wheel boosts and viewport-driven rendering tiers.
"""

from .layout import LayoutPolicy, RowUnit, SceneLayout, generate_layout
from .geometry import CorridorGeometry, PlacedArtwork, build_corridor_geometry
from .camera import CameraLoop, CameraParams, CameraState
from .controls import BoostParams, InputController
from .tiers import DeviceTier, TierSelector, classify_viewport
from .presentation import CorridorPresentation, Presentation, StripPresentation, build_presentation
from .projection import MatrixProjectionRenderer, ProjectionRenderer
from .preload import PreloadReport, preload_assets
from .scheduler import FrameDriver
from .session import FrameSnapshot, GallerySession
from .settings import GallerySettings, SessionSeeds, load_gallery_settings

__all__ = [
    "LayoutPolicy",
    "RowUnit",
    "SceneLayout",
    "generate_layout",
    "CorridorGeometry",
    "PlacedArtwork",
    "build_corridor_geometry",
    "CameraLoop",
    "CameraParams",
    "CameraState",
    "BoostParams",
    "InputController",
    "DeviceTier",
    "TierSelector",
    "classify_viewport",
    "CorridorPresentation",
    "Presentation",
    "StripPresentation",
    "build_presentation",
    "MatrixProjectionRenderer",
    "ProjectionRenderer",
    "PreloadReport",
    "preload_assets",
    "FrameDriver",
    "FrameSnapshot",
    "GallerySession",
    "GallerySettings",
    "SessionSeeds",
    "load_gallery_settings",
]
