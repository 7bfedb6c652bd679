"""Core models, types, and utilities."""

from aura_dashboard.core.models import (
    Builder,
    ComparisonSnapshot,
    Project,
    ScoredProject,
)
from aura_dashboard.core.types import Category, SourceKey, Tier, TimeRange

__all__ = [
    "Builder",
    "ComparisonSnapshot",
    "Project",
    "ScoredProject",
    "Category",
    "SourceKey",
    "Tier",
    "TimeRange",
]
