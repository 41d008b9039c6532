"""Reconciliation of raw honor facts into per-entity honor entries."""

from __future__ import annotations

from .audit import GroupAnomaly, GroupAudit, audit_groups
from .engine import ReconciliationEngine, ReconciliationResult, ReconciliationStats
from .naming import DEFAULT_HONOR_BASE_URL, DEFAULT_SOURCE_TAG, honor_name, honor_url

__all__ = [
    "DEFAULT_HONOR_BASE_URL",
    "DEFAULT_SOURCE_TAG",
    "GroupAnomaly",
    "GroupAudit",
    "ReconciliationEngine",
    "ReconciliationResult",
    "ReconciliationStats",
    "audit_groups",
    "honor_name",
    "honor_url",
]
