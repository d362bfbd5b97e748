"""Image Analysis

A request handler that downloads an image, detects labels with
Google Cloud Vision, translates the label names to Portuguese with
DeepL and returns a formatted summary.
"""

__version__ = "1.0.0"
