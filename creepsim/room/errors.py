"""Errors raised while loading a room description."""

from __future__ import annotations


class RoomLoadError(ValueError):
    """A room description is malformed and the world cannot be built."""
