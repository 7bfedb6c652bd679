"""Builder discovery scans and the known-builder leaderboard."""

from aura_dashboard.builders.discovery import BuilderDiscovery
from aura_dashboard.builders.leaderboard import BuilderLeaderboard, parse_time_range

__all__ = ["BuilderDiscovery", "BuilderLeaderboard", "parse_time_range"]
