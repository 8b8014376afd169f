"""
Note operations for the authenticated owner.

A note that belongs to someone else is indistinguishable from one that does
not exist. Partial updates apply a field only when its key is present with a
non-null value, so `isPinned: false` is honored.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, List, Mapping, Optional

from sqlalchemy import or_, select

from models import storage
from models.note import Note
from models.schemas.note import NoteCreateSchema, NotePinSchema, NoteUpdateSchema
from services.common import db_guard, load_payload
from utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

create_schema = NoteCreateSchema()
update_schema = NoteUpdateSchema()
pin_schema = NotePinSchema()


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _owned_note(user_id: str, note_id: str) -> Note:
    try:
        uuid.UUID(str(note_id))
    except ValueError:
        raise ValidationError("Invalid note id")
    session = storage.get_session()
    note = session.execute(
        select(Note).where(Note.id == str(note_id), Note.user_id == user_id)
    ).scalar_one_or_none()
    if note is None:
        raise NotFoundError("Note not found")
    return note


@db_guard
def list_notes(user_id: str) -> List[Note]:
    session = storage.get_session()
    q = (
        select(Note)
        .where(Note.user_id == user_id)
        .order_by(Note.is_pinned.desc(), Note.created_at.desc())
    )
    return list(session.execute(q).scalars())


@db_guard
def add_note(user_id: str, payload: Optional[Mapping[str, Any]]) -> Note:
    data = load_payload(create_schema, payload, "Title and content are required")
    note = Note(
        title=data["title"],
        content=data["content"],
        tags=data["tags"],
        is_pinned=data["is_pinned"],
        user_id=user_id,
    )
    storage.new(note)
    storage.save()
    logger.info("User %s created note %s", user_id, note.id)
    return note


@db_guard
def edit_note(user_id: str, note_id: str, payload: Optional[Mapping[str, Any]]) -> Note:
    data = load_payload(update_schema, payload, "Invalid note details")
    changes = {key: value for key, value in data.items() if value is not None}
    if not changes:
        raise ValidationError("No changes provided")

    note = _owned_note(user_id, note_id)
    for key, value in changes.items():
        setattr(note, key, value)
    storage.new(note)
    storage.save()
    return note


@db_guard
def set_pin(user_id: str, note_id: str, payload: Optional[Mapping[str, Any]]) -> Note:
    data = load_payload(pin_schema, payload, "No changes provided")
    note = _owned_note(user_id, note_id)
    note.is_pinned = data["is_pinned"]
    storage.new(note)
    storage.save()
    return note


@db_guard
def search_notes(user_id: str, query: Optional[str]) -> List[Note]:
    if query is None or not query.strip():
        raise ValidationError("Search query is required")
    pattern = f"%{_escape_like(query.strip())}%"
    session = storage.get_session()
    q = (
        select(Note)
        .where(
            Note.user_id == user_id,
            or_(Note.title.ilike(pattern, escape="\\"), Note.content.ilike(pattern, escape="\\")),
        )
        .order_by(Note.is_pinned.desc(), Note.created_at.desc())
    )
    return list(session.execute(q).scalars())


@db_guard
def delete_note(user_id: str, note_id: str) -> None:
    note = _owned_note(user_id, note_id)
    storage.delete(note)
    storage.save()
    logger.info("User %s deleted note %s", user_id, note.id)
