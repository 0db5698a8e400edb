# src/core/errors.py — v1
"""Pipeline exceptions.

Undecodable uploads are not errors (they pass through unchanged). Everything
below is converted to a Failure by api.facade, so callers see a kind and a
detail rather than a traceback.
"""

from __future__ import annotations


class ImageProcessingError(Exception):
    """Decoding succeeded but resizing or re-encoding failed."""


class TransportError(Exception):
    """The remote model could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
