"""Capabilities the request handler depends on.

The handler is typed against these protocols so any object with the
matching async methods can be injected, including test doubles.
"""

from typing import Protocol, runtime_checkable

from .vision_service import Label


@runtime_checkable
class ImageSource(Protocol):
    """Downloads raw image content."""

    async def fetch(self, url: str) -> bytes:
        ...

    async def close(self) -> None:
        ...


@runtime_checkable
class LabelDetector(Protocol):
    """Detects labels above the reporting threshold, in service order."""

    async def detect_labels(self, image_bytes: bytes) -> list[Label]:
        ...


@runtime_checkable
class Translator(Protocol):
    """Translates label names, returning one string per recovered name."""

    async def translate(self, names: list[str]) -> list[str]:
        ...
