"""
Module: extractor.config

Purpose:
    Configuration dataclass for the import pipeline. Immutable settings
    passed explicitly to ``import_exam``; there is no global state.

Key Classes:
    - ExtractionConfig: Main configuration for exam import

Dependencies:
    - dataclasses: For frozen dataclass support

Used By:
    - extractor.pipeline: Uses ExtractionConfig for pipeline settings
    - cli: Builds a config from command line flags
"""

from dataclasses import dataclass

from math_exam_toolkit.core.models.exams import DEFAULT_TIME_LIMIT


@dataclass(frozen=True)
class ExtractionConfig:
    """
    Configuration for the exam import pipeline.

    Attributes:
        time_limit: Minutes assigned to the imported exam (default 90)
        extract_images: Whether to pull media out of the container (default True)
        probe_image_sizes: Decode images with Pillow to record width/height
            (default True)
        run_diagnostics: Collect per-import data-quality issues (default True)
    """
    time_limit: int = DEFAULT_TIME_LIMIT
    extract_images: bool = True
    probe_image_sizes: bool = True
    run_diagnostics: bool = True

    def __post_init__(self) -> None:
        if self.time_limit < 0:
            raise ValueError(f"time_limit cannot be negative: {self.time_limit}")
