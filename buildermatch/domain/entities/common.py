"""Enumerations shared between openings and profiles."""

from __future__ import annotations

from enum import Enum


class RoleType(str, Enum):
    COFOUNDER = "cofounder"
    EMPLOYEE = "employee"
    INTERN = "intern"
    FRACTIONAL = "fractional"


class RemotePreference(str, Enum):
    ONSITE = "onsite"
    REMOTE = "remote"
    HYBRID = "hybrid"


class CompensationType(str, Enum):
    EQUITY_ONLY = "equity_only"
    EQUITY_STIPEND = "equity_stipend"
    INTERNSHIP = "internship"
    PAID_ONLY = "paid_only"


class RiskAppetite(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class StartupStage(str, Enum):
    IDEA = "idea"
    MVP_PROGRESS = "mvp_progress"
    MVP_LIVE = "mvp_live"
    EARLY_REVENUE = "early_revenue"


__all__ = [
    "CompensationType",
    "RemotePreference",
    "RiskAppetite",
    "RoleType",
    "StartupStage",
]
