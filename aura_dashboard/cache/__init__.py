from aura_dashboard.cache.comparison_cache import ComparisonCache

__all__ = ["ComparisonCache"]
