"""Error taxonomy and the mapping from internal errors to external responses."""

from typing import Optional


class ImageAnalysisError(Exception):
    """Base exception class for the image analysis pipeline."""

    stage: Optional[str] = None

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class InvalidRequestError(ImageAnalysisError):
    """Raised when the incoming event carries no usable image URL."""

    stage = "fetching"


class FetchError(ImageAnalysisError):
    """Raised when the image cannot be downloaded."""

    stage = "fetching"


class DetectionError(ImageAnalysisError):
    """Raised when the label detection call fails."""

    stage = "detecting"


class TranslationError(ImageAnalysisError):
    """Raised when the translation call fails or returns no text."""

    stage = "translating"


class AlignmentError(ImageAnalysisError):
    """Raised in strict mode when translations and labels differ in length."""

    stage = "formatting"


class ConfigurationError(ImageAnalysisError):
    """Raised when there's a configuration issue."""


GENERIC_ERROR_BODY = "Internal server error"

# Every internal error collapses to the same opaque response.
ERROR_RESPONSES: dict[type, tuple[int, str]] = {
    InvalidRequestError: (500, GENERIC_ERROR_BODY),
    FetchError: (500, GENERIC_ERROR_BODY),
    DetectionError: (500, GENERIC_ERROR_BODY),
    TranslationError: (500, GENERIC_ERROR_BODY),
    AlignmentError: (500, GENERIC_ERROR_BODY),
    ConfigurationError: (500, GENERIC_ERROR_BODY),
    ImageAnalysisError: (500, GENERIC_ERROR_BODY),
}

DEFAULT_ERROR_RESPONSE = (500, GENERIC_ERROR_BODY)


def error_response(error: BaseException) -> dict:
    """Build the external response for an error.

    The lookup walks the error's MRO so subclasses inherit the entry of
    their nearest mapped ancestor. Unmapped errors get the default.

    Args:
        error: The exception that aborted the pipeline.

    Returns:
        Response dictionary with ``statusCode`` and ``body``.
    """
    status_code, body = DEFAULT_ERROR_RESPONSE
    for cls in type(error).__mro__:
        if cls in ERROR_RESPONSES:
            status_code, body = ERROR_RESPONSES[cls]
            break

    return {"statusCode": status_code, "body": body}
