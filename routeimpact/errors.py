from __future__ import annotations


class RouteImpactError(Exception):
    """Base error for route impact analysis."""


class StorageError(RouteImpactError):
    """A storage provider could not complete an operation."""

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(message)
        self.path = path
