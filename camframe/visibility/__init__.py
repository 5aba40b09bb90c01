"""
Visibility module: per-volume classification against the camera viewport
and the running pass/fail report.
"""

from camframe.visibility.checker import (
    TestReport,
    VisibilityChecker,
    VisibilityVerdict,
    VolumeResult,
    format_report,
)

__all__ = [
    "TestReport",
    "VisibilityChecker",
    "VisibilityVerdict",
    "VolumeResult",
    "format_report",
]
