from .responses import DashboardResponse, DashboardVariant, NavItem, SchoolStats

__all__ = ["DashboardResponse", "DashboardVariant", "NavItem", "SchoolStats"]
