"""Issue detectors run by the content strategies."""

from blankfix.scanner.detectors.base import BaseDetector
from blankfix.scanner.detectors.stray_text import StrayTextDetector
from blankfix.scanner.detectors.template_literal import TemplateLiteralDetector

ALL_DETECTORS: list[type[BaseDetector]] = [
    StrayTextDetector,
    TemplateLiteralDetector,
]


def default_detectors() -> list[BaseDetector]:
    return [cls() for cls in ALL_DETECTORS]
