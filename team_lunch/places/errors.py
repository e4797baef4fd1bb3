from __future__ import annotations


class PlacesError(Exception):
    """Base class for failures reported back to the proxy caller."""

    status = "ERROR"


class PlacesConfigError(PlacesError):
    """The service is missing a required credential."""


class PlacesUpstreamError(PlacesError):
    """The Places web service failed or answered with a non-success status."""

    def __init__(self, message: str, status: str = "ERROR") -> None:
        super().__init__(message)
        self.status = status
