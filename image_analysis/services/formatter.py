"""Result formatting: pairs translated names with label confidences."""

from typing import Sequence

from ..errors import AlignmentError
from .vision_service import Label

RESULT_TEMPLATE = "{confidence:.2f}% de ser do tipo {name}"


def format_results(
    translated_names: Sequence[str],
    labels: Sequence[Label],
    strict: bool = False,
) -> str:
    """Render one line per translated name.

    Names and labels are paired by index. In lenient mode the longer
    sequence is truncated to the shorter one; in strict mode a length
    mismatch raises.

    Args:
        translated_names: Translated label names.
        labels: Labels in the order they were sent for translation.
        strict: Raise instead of truncating on a length mismatch.

    Returns:
        Newline-joined result lines.

    Raises:
        AlignmentError: In strict mode, if the lengths differ.
    """
    if strict and len(translated_names) != len(labels):
        raise AlignmentError(
            f"Got {len(translated_names)} translations for {len(labels)} labels"
        )

    lines = [
        RESULT_TEMPLATE.format(confidence=label.confidence, name=name)
        for name, label in zip(translated_names, labels)
    ]
    return "\n".join(lines)
