"""Templates collection endpoints: plain CRUD over the JSON store."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response

from timekeeper.api.meetings import get_store
from timekeeper.db.json_store import JsonStore
from timekeeper.models.agenda import Template

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("")
async def list_templates(store: JsonStore = Depends(get_store)) -> list[dict]:
    """Return every stored template."""
    return await store.list("templates")


@router.post("", status_code=201)
async def create_template(
    template: Template,
    store: JsonStore = Depends(get_store),
) -> dict:
    """Store a new template document."""
    return await store.insert("templates", template.to_document())


@router.put("/{template_id}")
async def update_template(
    template_id: str,
    partial: dict[str, Any],
    store: JsonStore = Depends(get_store),
) -> dict:
    """Merge fields into a stored template.

    Raises:
        HTTPException: 404 if the template does not exist
    """
    updated = await store.update("templates", template_id, partial)
    if updated is None:
        raise HTTPException(status_code=404, detail="Template not found")
    return updated


@router.delete("/{template_id}", status_code=204)
async def delete_template(
    template_id: str,
    store: JsonStore = Depends(get_store),
) -> Response:
    """Remove a template. Meetings created from it are unaffected."""
    await store.delete("templates", template_id)
    return Response(status_code=204)
