"""Meetings collection endpoints: plain CRUD over the JSON store."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from timekeeper.db.json_store import JsonStore
from timekeeper.models.meeting import Meeting

router = APIRouter(prefix="/meetings", tags=["meetings"])


def get_store(request: Request) -> JsonStore:
    """Dependency to get JsonStore from app state."""
    if not hasattr(request.app.state, "store"):
        raise HTTPException(status_code=500, detail="Store not initialized")
    return request.app.state.store


@router.get("")
async def list_meetings(store: JsonStore = Depends(get_store)) -> list[dict]:
    """Return every stored meeting."""
    return await store.list("meetings")


@router.post("", status_code=201)
async def create_meeting(
    meeting: Meeting,
    store: JsonStore = Depends(get_store),
) -> dict:
    """Store a new meeting document as sent by the client."""
    return await store.insert("meetings", meeting.to_document())


@router.put("/{meeting_id}")
async def update_meeting(
    meeting_id: str,
    partial: dict[str, Any],
    store: JsonStore = Depends(get_store),
) -> dict:
    """Merge fields into a stored meeting.

    Raises:
        HTTPException: 404 if the meeting does not exist
    """
    updated = await store.update("meetings", meeting_id, partial)
    if updated is None:
        raise HTTPException(status_code=404, detail="Meeting not found")
    return updated


@router.delete("/{meeting_id}", status_code=204)
async def delete_meeting(
    meeting_id: str,
    store: JsonStore = Depends(get_store),
) -> Response:
    """Remove a meeting. Deleting an unknown id is not an error."""
    await store.delete("meetings", meeting_id)
    return Response(status_code=204)
