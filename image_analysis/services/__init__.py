"""Services module for the image analysis pipeline."""

from .formatter import format_results
from .image_fetcher import ImageFetcher
from .interfaces import ImageSource, LabelDetector, Translator
from .translation_service import TranslationService
from .vision_service import Label, VisionService

__all__ = [
    "format_results",
    "ImageFetcher",
    "ImageSource",
    "Label",
    "LabelDetector",
    "TranslationService",
    "Translator",
    "VisionService",
]
