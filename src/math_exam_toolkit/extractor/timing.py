"""
Module: extractor.timing

Purpose:
    Timing instrumentation for the import pipeline, used to see which
    phase of a large document dominates.

Key Classes:
    - TimingLog: Collects import-level and per-section timing metrics

Key Functions:
    - timed_phase: Context manager for timing code blocks

Dependencies:
    - time (std)
    - contextlib (std)
    - dataclasses (std)

Used By:
    - extractor.pipeline: Main import orchestrator
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass
class TimingLog:
    """
    Timing metrics for one import.

    Attributes:
        phase_timings: Dict of phase_name -> duration_seconds
        section_timings: Dict of section label -> {phase_name -> duration_seconds}

    Example:
        >>> log = TimingLog()
        >>> log.log_phase("segmentation", 0.021)
        >>> log.log_section("PHẦN 1", "parsing", 0.004)
        >>> print(log.summary())
    """
    phase_timings: Dict[str, float] = field(default_factory=dict)
    section_timings: Dict[str, Dict[str, float]] = field(default_factory=dict)

    def log_phase(self, phase: str, duration: float) -> None:
        """Log an import-level timing metric."""
        self.phase_timings[phase] = duration

    def log_section(self, section: str, phase: str, duration: float) -> None:
        """Log a section-level timing metric."""
        self.section_timings.setdefault(section, {})[phase] = duration

    @property
    def total(self) -> float:
        """Sum of all import-level phases."""
        return sum(self.phase_timings.values())

    def get_slowest_phases(self, n: int = 3) -> List[Tuple[str, float]]:
        """Get the N slowest import-level phases."""
        return sorted(self.phase_timings.items(), key=lambda x: x[1], reverse=True)[:n]

    def summary(self) -> str:
        """Generate human-readable timing summary."""
        lines = ["", "=== Import Timing Summary ==="]

        if self.phase_timings:
            lines.append("Phases:")
            for phase, duration in self.phase_timings.items():
                lines.append(f"  {phase:25s} {duration:.3f}s")
            lines.append(f"  {'total':25s} {self.total:.3f}s")

        if self.section_timings:
            lines.append("")
            lines.append("Sections:")
            for section, phases in self.section_timings.items():
                for phase, duration in phases.items():
                    lines.append(f"  {section} {phase:18s} {duration:.3f}s")

        lines.append("")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Export timing data as dictionary."""
        return {
            "phase_timings": self.phase_timings,
            "section_timings": self.section_timings,
            "total": self.total,
            "slowest_phases": [
                {"phase": phase, "duration": duration}
                for phase, duration in self.get_slowest_phases(5)
            ],
        }

    def save(self, path: Path) -> None:
        """Save timing data to a JSON file, overwriting it."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        logger.debug(f"Saved timing data to {path}")


@contextmanager
def timed_phase(
    log: TimingLog,
    phase: str,
    section: Optional[str] = None,
) -> Generator[None, None, None]:
    """
    Context manager for timing a code phase.

    Args:
        log: TimingLog instance to record metrics
        phase: Name of the phase being timed
        section: If provided, records as a section-level metric;
                 otherwise records as an import-level metric

    Example:
        >>> log = TimingLog()
        >>> with timed_phase(log, "segmentation"):
        ...     paragraphs = extract_paragraphs(root)
        >>> with timed_phase(log, "parsing", section="PHẦN 2"):
        ...     questions = parse_section(...)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if section:
            log.log_section(section, phase, elapsed)
        else:
            log.log_phase(phase, elapsed)
