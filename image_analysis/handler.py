"""Request handler for image label analysis.

Downloads the image named in the request, detects labels, translates
them to Portuguese and returns a one-line-per-label summary. Any failure
is logged in full and answered with an opaque error response.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .errors import InvalidRequestError, error_response
from .services import (
    ImageFetcher,
    ImageSource,
    Label,
    LabelDetector,
    TranslationService,
    Translator,
    VisionService,
    format_results,
)
from .utils import Config

logger = logging.getLogger(__name__)

RESPONSE_HEADER = "A imagem tem\n"


class PipelineStage(Enum):
    """Stages of a single analysis request."""

    FETCHING = "fetching"
    DETECTING = "detecting"
    TRANSLATING = "translating"
    FORMATTING = "formatting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class AnalysisResult:
    """Everything produced while handling one request."""

    image_url: str
    labels: list[Label] = field(default_factory=list)
    translated_names: list[str] = field(default_factory=list)
    summary: str = ""
    stage: PipelineStage = PipelineStage.FETCHING
    failed_stage: Optional[PipelineStage] = None

    @property
    def body(self) -> str:
        return RESPONSE_HEADER + self.summary


def extract_image_url(event: Optional[dict]) -> str:
    """Read ``imageUrl`` from the event's query string parameters.

    Raises:
        InvalidRequestError: If the parameter is missing or empty.
    """
    params = (event or {}).get("queryStringParameters") or {}
    image_url = params.get("imageUrl")
    if not image_url:
        raise InvalidRequestError("Missing 'imageUrl' query string parameter")
    return image_url


class ImageAnalysisHandler:
    """Runs the fetch, detect, translate and format stages in order."""

    def __init__(
        self,
        fetcher: ImageSource,
        vision_service: LabelDetector,
        translation_service: Translator,
        strict_alignment: bool = False,
    ):
        """Initialize the handler.

        Args:
            fetcher: Downloads image bytes.
            vision_service: Detects and filters labels.
            translation_service: Translates label names.
            strict_alignment: Fail when translations and labels differ in
                count instead of truncating.
        """
        self.fetcher = fetcher
        self.vision_service = vision_service
        self.translation_service = translation_service
        self.strict_alignment = strict_alignment

    async def _run(self, result: AnalysisResult) -> None:
        try:
            result.stage = PipelineStage.FETCHING
            logger.info("downloading image...")
            image_bytes = await self.fetcher.fetch(result.image_url)

            result.stage = PipelineStage.DETECTING
            logger.info("detecting labels...")
            result.labels = await self.vision_service.detect_labels(image_bytes)

            result.stage = PipelineStage.TRANSLATING
            logger.info("translating to Portuguese...")
            names = [label.name for label in result.labels]
            result.translated_names = await self.translation_service.translate(names)

            result.stage = PipelineStage.FORMATTING
            logger.info("handling final object...")
            result.summary = format_results(
                result.translated_names,
                result.labels,
                strict=self.strict_alignment,
            )

            result.stage = PipelineStage.DONE
            logger.info("finishing...")
        except Exception:
            result.failed_stage = result.stage
            result.stage = PipelineStage.FAILED
            raise

    async def analyze(self, image_url: str) -> AnalysisResult:
        """Run the pipeline for one image URL.

        Args:
            image_url: URL of the image to analyze.

        Returns:
            The completed AnalysisResult.

        Raises:
            ImageAnalysisError: Whichever stage failed.
        """
        result = AnalysisResult(image_url=image_url)
        await self._run(result)
        return result

    async def main(self, event: Optional[dict]) -> dict:
        """Handle a request event.

        Args:
            event: Event with ``queryStringParameters.imageUrl``.

        Returns:
            ``{"statusCode": 200, "body": ...}`` on success, otherwise the
            generic error response.
        """
        result: Optional[AnalysisResult] = None
        try:
            result = AnalysisResult(image_url=extract_image_url(event))
            await self._run(result)
        except Exception as e:
            stage = result.failed_stage if result else PipelineStage.FETCHING
            logger.exception(f"Error during {stage.value}: {e}")
            return error_response(e)

        return {"statusCode": 200, "body": result.body}

    async def close(self) -> None:
        await self.fetcher.close()


def create_handler(config: Optional[Config] = None) -> ImageAnalysisHandler:
    """Build a handler wired to the real services.

    Args:
        config: Configuration instance. Loaded from defaults if omitted.

    Returns:
        Configured ImageAnalysisHandler.
    """
    config = config or Config()
    return ImageAnalysisHandler(
        fetcher=ImageFetcher(timeout=config.http_timeout),
        vision_service=VisionService(
            max_results=config.vision_max_results,
            timeout=config.vision_timeout,
        ),
        translation_service=TranslationService(
            api_key=config.deepl_api_key,
            strategy=config.translation_strategy,
            timeout=config.translation_timeout,
        ),
        strict_alignment=config.strict_alignment,
    )


async def _invoke(event: Optional[dict]) -> dict:
    try:
        handler = create_handler()
    except Exception as e:
        logger.exception(f"Failed to build handler: {e}")
        return error_response(e)

    try:
        return await handler.main(event)
    finally:
        await handler.close()


def lambda_handler(event: Optional[dict], context: Any = None) -> dict:
    """Synchronous serverless entry point."""
    return asyncio.run(_invoke(event))
