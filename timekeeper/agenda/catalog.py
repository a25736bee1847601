"""Catalog of reusable agenda templates.

Built-in templates are seeded whenever the catalog is empty at first use.
Agendas are parsed from free text on every create/update, so a template
always carries a concrete, time-allocated item list.
"""

from datetime import UTC, datetime

import structlog

from timekeeper.agenda.parser import describe_agenda, parse_agenda_items
from timekeeper.errors import NotFoundError, ValidationError, ValidationErrorKind
from timekeeper.models.agenda import AgendaItem, Template
from timekeeper.models.base import new_id

logger = structlog.get_logger()


def default_templates() -> list[Template]:
    """Built-in templates installed into an empty catalog."""
    seeds = [
        (
            "template_daily_standup",
            "Daily Standup",
            15,
            [
                ("Yesterday's progress", 4),
                ("Today's plan", 4),
                ("Blockers", 4),
                ("Wrap-up", 3),
            ],
        ),
        (
            "template_client_review",
            "Client Review",
            45,
            [
                ("Project overview", 10),
                ("Demo", 15),
                ("Client feedback", 15),
                ("Next steps", 5),
            ],
        ),
        (
            "template_brainstorming",
            "Brainstorming",
            60,
            [
                ("Problem statement", 10),
                ("Idea generation", 25),
                ("Discussion", 15),
                ("Action items", 10),
            ],
        ),
    ]
    templates = []
    for template_id, name, minutes, items in seeds:
        agenda = [AgendaItem(title=t, duration=d) for t, d in items]
        templates.append(
            Template(
                id=template_id,
                name=name,
                total_duration=minutes,
                agenda=agenda,
                description=describe_agenda(agenda),
            )
        )
    return templates


def _validate(name: str, total_duration: int | None, agenda_text: str) -> None:
    if not name or not name.strip():
        raise ValidationError(
            ValidationErrorKind.MISSING_REQUIRED_FIELD, "Template name is required"
        )
    if not total_duration or total_duration <= 0:
        raise ValidationError(
            ValidationErrorKind.MISSING_REQUIRED_FIELD,
            "Template duration must be a positive number of minutes",
        )
    if not agenda_text or not agenda_text.strip():
        raise ValidationError(
            ValidationErrorKind.MISSING_REQUIRED_FIELD, "Template agenda is required"
        )


class TemplateCatalog:
    """Named, reusable agenda definitions.

    Operates on a caller-owned list so the application state stays the
    single source of truth. ``build_*`` methods are pure and let the caller
    persist before the in-memory list changes.
    """

    def __init__(self, templates: list[Template] | None = None):
        """Initialize catalog.

        Args:
            templates: Backing list, mutated in place
        """
        self._templates = templates if templates is not None else []

    def ensure_defaults(self) -> bool:
        """Seed built-in templates if the catalog is empty.

        Returns:
            True if defaults were installed
        """
        if self._templates:
            return False
        self._templates.extend(default_templates())
        logger.info("default templates installed", count=len(self._templates))
        return True

    def list(self) -> list[Template]:
        """All templates in catalog order."""
        return list(self._templates)

    def get(self, template_id: str | None) -> Template | None:
        """Look up a template by id."""
        if not template_id:
            return None
        for template in self._templates:
            if template.id == template_id:
                return template
        return None

    def build_new(self, name: str, total_duration: int, agenda_text: str) -> Template:
        """Create a template without adding it to the catalog.

        Raises:
            ValidationError: If any field is missing
        """
        _validate(name, total_duration, agenda_text)
        agenda = parse_agenda_items(agenda_text, total_duration)
        return Template(
            id=new_id("template"),
            name=name.strip(),
            total_duration=total_duration,
            agenda=agenda,
            description=describe_agenda(agenda),
        )

    def build_update(
        self,
        template_id: str,
        name: str,
        total_duration: int,
        agenda_text: str,
    ) -> Template:
        """Produce the edited version of a template without storing it.

        ``id`` and ``created_at`` are preserved; everything else is replaced.

        Raises:
            ValidationError: If any field is missing
            NotFoundError: If the template does not exist
        """
        _validate(name, total_duration, agenda_text)
        current = self.get(template_id)
        if current is None:
            raise NotFoundError("Template", template_id)
        agenda = parse_agenda_items(agenda_text, total_duration)
        return current.model_copy(
            update={
                "name": name.strip(),
                "total_duration": total_duration,
                "agenda": agenda,
                "description": describe_agenda(agenda),
                "updated_at": datetime.now(UTC),
            }
        )

    def add(self, template: Template) -> Template:
        """Append a template to the catalog."""
        self._templates.append(template)
        return template

    def replace(self, template: Template) -> Template:
        """Swap in an edited template, keeping its position.

        Raises:
            NotFoundError: If no template has the same id
        """
        for index, existing in enumerate(self._templates):
            if existing.id == template.id:
                self._templates[index] = template
                return template
        raise NotFoundError("Template", template.id)

    def create(self, name: str, total_duration: int, agenda_text: str) -> Template:
        """Parse and add a new template."""
        template = self.add(self.build_new(name, total_duration, agenda_text))
        logger.info("template created", template_id=template.id, name=template.name)
        return template

    def update(
        self,
        template_id: str,
        name: str,
        total_duration: int,
        agenda_text: str,
    ) -> Template:
        """Re-parse and replace an existing template."""
        template = self.replace(
            self.build_update(template_id, name, total_duration, agenda_text)
        )
        logger.info("template updated", template_id=template_id)
        return template

    def delete(self, template_id: str) -> bool:
        """Remove a template.

        Meetings created from it keep their own agenda snapshot.

        Returns:
            True if a template was removed
        """
        before = len(self._templates)
        self._templates[:] = [t for t in self._templates if t.id != template_id]
        removed = len(self._templates) < before
        if removed:
            logger.info("template deleted", template_id=template_id)
        return removed
