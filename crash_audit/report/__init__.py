"""Text reports for audit results."""

from .renderer import ReportRenderer

__all__ = ["ReportRenderer"]
