"""Exception types raised by the Region Marker editor."""

from __future__ import annotations


class RegionMarkerError(Exception):
    """Base class for all editor errors."""


class ImageLoadFailure(RegionMarkerError):
    """The source image could not be read or decoded."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Failed to load image {source!r}: {reason}")
        self.source = source
        self.reason = reason


class ExportFailure(RegionMarkerError):
    """The export surface could not be allocated or painted."""


class SessionClosedError(RegionMarkerError):
    """An operation was requested on a session that was already saved or cancelled."""
