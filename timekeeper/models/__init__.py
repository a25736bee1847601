"""Canonical data models for Timekeeper.

This module exports all domain models used throughout the application:
- BaseEntity: Base class with id and creation timestamp
- AgendaItem / Template: Agenda entries and reusable templates
- Meeting: Scheduled or running meeting
- CompletionRecord / AnalyticsLog / KPISummary: Completion analytics
- UserSettings: Local preferences
"""

from timekeeper.models.agenda import AgendaItem, Template
from timekeeper.models.analytics import (
    AnalyticsLog,
    CompletionRecord,
    KPISummary,
    UserSettings,
)
from timekeeper.models.base import BaseEntity, CamelModel, new_id, utc_now
from timekeeper.models.meeting import Meeting, MeetingStatus

__all__ = [
    # Base
    "BaseEntity",
    "CamelModel",
    "new_id",
    "utc_now",
    # Agenda
    "AgendaItem",
    "Template",
    # Meeting
    "Meeting",
    "MeetingStatus",
    # Analytics
    "AnalyticsLog",
    "CompletionRecord",
    "KPISummary",
    "UserSettings",
]
