"""Tests for VisionService."""

from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from image_analysis.errors import DetectionError
from image_analysis.services.vision_service import (
    CONFIDENCE_THRESHOLD,
    Label,
    VisionService,
    filter_labels,
)


def make_response(labels, error_message=""):
    """Build a Vision-like response from (description, score) pairs."""
    return SimpleNamespace(
        error=SimpleNamespace(message=error_message),
        label_annotations=[
            SimpleNamespace(description=name, score=score) for name, score in labels
        ],
    )


class TestFilterLabels:
    """Tests for the confidence filter."""

    def test_threshold_is_fixed(self):
        """Test the reporting threshold."""
        assert CONFIDENCE_THRESHOLD == 80.0

    def test_keeps_only_labels_above_threshold(self):
        """Test that labels at or below 80 are dropped."""
        labels = [
            Label("Cat", 95.5),
            Label("Pet", 80.0),
            Label("Dog", 81.2),
            Label("Fur", 42.0),
            Label("Whiskers", 80.01),
        ]

        result = filter_labels(labels)

        assert [l.name for l in result] == ["Cat", "Dog", "Whiskers"]

    def test_preserves_service_order(self):
        """Test that filtering does not sort by confidence."""
        labels = [Label("Low", 81.0), Label("High", 99.0), Label("Mid", 90.0)]

        result = filter_labels(labels)

        assert [l.name for l in result] == ["Low", "High", "Mid"]

    def test_accepts_name_confidence_pairs(self):
        """Test (name, confidence) pairs are filtered like labels."""
        result = filter_labels([("Cat", 95.5), ("Pet", 80.0), ("Dog", 81.2)])

        assert result == [Label("Cat", 95.5), Label("Dog", 81.2)]

    def test_accepts_service_mappings(self):
        """Test Name/Confidence mappings are filtered like labels."""
        result = filter_labels(
            [
                {"Name": "Cat", "Confidence": 95.5},
                {"Name": "Fur", "Confidence": 42.0},
            ]
        )

        assert result == [Label("Cat", 95.5)]

    def test_empty(self):
        """Test filtering nothing."""
        assert filter_labels([]) == []


class TestLabel:
    """Tests for Label construction."""

    def test_from_annotation_scales_score(self):
        """Test Vision scores are converted to percent."""
        label = Label.from_annotation(SimpleNamespace(description="Cat", score=0.955))

        assert label == Label("Cat", 95.5)

    def test_from_annotation_threshold_boundary(self):
        """Test a 0.8 score lands exactly on the threshold."""
        label = Label.from_annotation(SimpleNamespace(description="Pet", score=0.8))

        assert label.confidence == 80.0
        assert filter_labels([label]) == []

    def test_from_dict(self):
        """Test building a label from a Name/Confidence mapping."""
        label = Label.from_dict({"Name": "Dog", "Confidence": 81.2})

        assert label == Label("Dog", 81.2)

    def test_is_immutable(self):
        """Test that labels cannot be modified."""
        label = Label("Cat", 95.5)

        with pytest.raises(AttributeError):
            label.confidence = 10.0


class TestVisionService:
    """Tests for VisionService.detect_labels."""

    @pytest.fixture
    def client(self):
        """Mock Vision client."""
        return Mock()

    @pytest.fixture
    def service(self, client):
        """Create a VisionService with a mock client."""
        return VisionService(max_results=10, client=client)

    @pytest.mark.asyncio
    async def test_detect_labels(self, service, client):
        """Test labels are converted and filtered in order."""
        client.annotate_image.return_value = make_response(
            [("Cat", 0.955), ("Animal", 0.5), ("Dog", 0.812)]
        )

        labels = await service.detect_labels(b"image-bytes")

        assert labels == [Label("Cat", 95.5), Label("Dog", 81.2)]
        client.annotate_image.assert_called_once()

    @pytest.mark.asyncio
    async def test_request_contents(self, service, client):
        """Test the request carries the image bytes and label feature."""
        client.annotate_image.return_value = make_response([])

        await service.detect_labels(b"image-bytes")

        request = client.annotate_image.call_args.args[0]
        assert request["image"].content == b"image-bytes"
        assert request["features"][0]["max_results"] == 10

    @pytest.mark.asyncio
    async def test_no_labels(self, service, client):
        """Test that a response without labels gives an empty list."""
        client.annotate_image.return_value = make_response([])

        assert await service.detect_labels(b"image-bytes") == []

    @pytest.mark.asyncio
    async def test_client_exception(self, service, client):
        """Test that client failures raise DetectionError."""
        client.annotate_image.side_effect = RuntimeError("quota exceeded")

        with pytest.raises(DetectionError) as exc_info:
            await service.detect_labels(b"image-bytes")

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert exc_info.value.stage == "detecting"

    @pytest.mark.asyncio
    async def test_response_error(self, service, client):
        """Test that an error reported in the response raises DetectionError."""
        client.annotate_image.return_value = make_response(
            [("Cat", 0.99)], error_message="Bad image data"
        )

        with pytest.raises(DetectionError, match="Bad image data"):
            await service.detect_labels(b"not-an-image")

    @pytest.mark.asyncio
    async def test_timeout_reaches_client(self, client):
        """Test the configured timeout is passed to annotate_image."""
        service = VisionService(timeout=4.0, client=client)
        client.annotate_image.return_value = make_response([])

        await service.detect_labels(b"image-bytes")

        assert client.annotate_image.call_args.kwargs["timeout"] == 4.0

    @pytest.mark.asyncio
    async def test_no_timeout_keeps_sdk_default(self, client):
        """Test a None timeout leaves the SDK default in place."""
        service = VisionService(timeout=None, client=client)
        client.annotate_image.return_value = make_response([])

        await service.detect_labels(b"image-bytes")

        assert "timeout" not in client.annotate_image.call_args.kwargs
