"""Agenda parsing and the template catalog."""

from timekeeper.agenda.catalog import TemplateCatalog, default_templates
from timekeeper.agenda.parser import (
    DEFAULT_TARGET_MINUTES,
    FALLBACK_TITLE,
    agenda_total,
    describe_agenda,
    format_agenda_text,
    parse_agenda_items,
)

__all__ = [
    "DEFAULT_TARGET_MINUTES",
    "FALLBACK_TITLE",
    "TemplateCatalog",
    "agenda_total",
    "default_templates",
    "describe_agenda",
    "format_agenda_text",
    "parse_agenda_items",
]
