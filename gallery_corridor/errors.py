"""Exception types raised while assembling a gallery session."""
from __future__ import annotations


class GalleryError(ValueError):
    """Base class for configuration problems detected before the walk starts."""


class LayoutError(GalleryError):
    """The row layout could not be generated from the given catalog."""


class GeometryError(GalleryError):
    """The corridor geometry was requested with invalid replication."""


class SettingsError(GalleryError):
    """A bundled or user supplied configuration file is malformed."""
