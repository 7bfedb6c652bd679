"""Revenue aggregation and aura-score ranking for crypto projects and builders."""

__version__ = "0.1.0"
