from aura_dashboard.web.server import DashboardApi

__all__ = ["DashboardApi"]
