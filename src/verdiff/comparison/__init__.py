"""Snapshot-pair comparison and report rendering."""

from verdiff.comparison.comparator import VersionComparator
from verdiff.comparison.models import (
    ApiChange,
    ApiChangeType,
    ComparisonRecommendations,
    ComparisonResult,
    ComparisonSummary,
    MetricDelta,
    QualityMetricDiff,
    RenderedReport,
    ReportMetadata,
)

__all__ = [
    "ApiChange",
    "ApiChangeType",
    "ComparisonRecommendations",
    "ComparisonResult",
    "ComparisonSummary",
    "MetricDelta",
    "QualityMetricDiff",
    "RenderedReport",
    "ReportMetadata",
    "VersionComparator",
]
