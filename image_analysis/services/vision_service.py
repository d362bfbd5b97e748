"""Google Cloud Vision Label Service

Detects labels in image bytes using Google Cloud Vision API and keeps
only the ones above the reporting threshold.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Union

from google.cloud import vision

from ..errors import DetectionError

logger = logging.getLogger(__name__)

# Labels at or below this confidence (percent) are never reported.
CONFIDENCE_THRESHOLD = 80.0


@dataclass(frozen=True)
class Label:
    """A detected label with its confidence as a percentage (0-100)."""

    name: str
    confidence: float

    @classmethod
    def from_annotation(cls, annotation: Any) -> "Label":
        """Build a Label from a Vision ``EntityAnnotation``.

        Vision scores are in [0, 1]; they are scaled to percent and rounded
        so that a score of 0.8 lands exactly on the threshold.
        """
        return cls(
            name=annotation.description,
            confidence=round(annotation.score * 100, 4),
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Label":
        """Build a Label from a ``{"Name": ..., "Confidence": ...}`` mapping."""
        return cls(name=data["Name"], confidence=float(data["Confidence"]))


def _as_label(item: Union[Label, Mapping, tuple]) -> Label:
    if isinstance(item, Label):
        return item
    if isinstance(item, Mapping):
        return Label.from_dict(item)
    name, confidence = item
    return Label(name=name, confidence=float(confidence))


def filter_labels(labels: Iterable[Union[Label, Mapping, tuple]]) -> list[Label]:
    """Keep labels strictly above the confidence threshold.

    Args:
        labels: Labels in the order returned by the service, as Label
            objects, ``(name, confidence)`` pairs or ``Name``/``Confidence``
            mappings.

    Returns:
        Filtered labels, order preserved.
    """
    normalized = (_as_label(item) for item in labels)
    return [label for label in normalized if label.confidence > CONFIDENCE_THRESHOLD]


class VisionService:
    """Service for detecting image labels with Google Cloud Vision API."""

    def __init__(
        self,
        max_results: int = 20,
        timeout: Optional[float] = 30.0,
        client: Optional[vision.ImageAnnotatorClient] = None,
    ):
        """Initialize the Vision service.

        Args:
            max_results: Maximum number of labels to request.
            timeout: Per-request timeout in seconds. None keeps the SDK default.
            client: Optional pre-built Vision client.
        """
        self.max_results = max_results
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> vision.ImageAnnotatorClient:
        """Get or create the Vision API client.

        Returns:
            Vision API client instance.
        """
        if self._client is None:
            self._client = vision.ImageAnnotatorClient()
        return self._client

    def _annotate(self, image_bytes: bytes) -> Any:
        image = vision.Image(content=image_bytes)
        request = {
            "image": image,
            "features": [
                {
                    "type_": vision.Feature.Type.LABEL_DETECTION,
                    "max_results": self.max_results,
                }
            ],
        }
        if self.timeout is None:
            return self.client.annotate_image(request)
        return self.client.annotate_image(request, timeout=self.timeout)

    async def detect_labels(self, image_bytes: bytes) -> list[Label]:
        """Detect labels in an image.

        The blocking SDK call runs in a worker thread so the event loop
        stays free while waiting.

        Args:
            image_bytes: Raw image content.

        Returns:
            Labels above the threshold, in the service's order. A response
            without label annotations yields an empty list.

        Raises:
            DetectionError: If the API call fails or reports an error.
        """
        try:
            response = await asyncio.to_thread(self._annotate, image_bytes)
        except Exception as e:
            raise DetectionError(f"Label detection failed: {e}") from e

        if response.error.message:
            raise DetectionError(f"Vision API error: {response.error.message}")

        annotations = response.label_annotations or []
        labels = filter_labels(Label.from_annotation(a) for a in annotations)

        logger.info(
            f"Detected {len(annotations)} labels, "
            f"{len(labels)} above {CONFIDENCE_THRESHOLD:.0f}%"
        )
        return labels
