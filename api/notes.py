from __future__ import annotations

from flask import Blueprint, g, request

from api.responses import api_response
from models.schemas.note import NoteOutSchema
from services import notes as note_service
from utils.decorators import authenticate_request

bp = Blueprint("notes", __name__)

out_schema = NoteOutSchema()
out_list_schema = NoteOutSchema(many=True)


@bp.before_request
def authenticate():
    # every note route needs an authenticated owner
    authenticate_request()


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


@bp.get("/get-all-notes")
def get_all_notes():
    """
    List the current user's notes, pinned first
    ---
    tags: [Notes]
    security:
      - Bearer: []
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
    """
    notes = note_service.list_notes(g.current_user.id)
    return api_response(out_list_schema.dump(notes), "All notes retrieved.")


@bp.post("/add-note")
def add_note():
    """
    Create a note
    ---
    tags: [Notes]
    security:
      - Bearer: []
    consumes: [application/json]
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [title, content]
          properties:
            title: { type: string }
            content: { type: string }
            tags: { type: array, items: { type: string } }
            isPinned: { type: boolean }
    responses:
      201: { description: Created }
      400: { description: Validation error }
    """
    note = note_service.add_note(g.current_user.id, _json_body())
    return api_response(out_schema.dump(note), "Note created.", 201)


@bp.patch("/edit-note/<note_id>")
def edit_note(note_id: str):
    """
    Update a note (partial)
    ---
    tags: [Notes]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: note_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            title: { type: string }
            content: { type: string }
            tags: { type: array, items: { type: string } }
            isPinned: { type: boolean }
    responses:
      200: { description: OK }
      400: { description: No changes provided }
      404: { description: Not found }
    """
    note = note_service.edit_note(g.current_user.id, note_id, _json_body())
    return api_response(out_schema.dump(note), "Note updated.")


@bp.patch("/update-pin/<note_id>")
def update_pin(note_id: str):
    """
    Pin or unpin a note
    ---
    tags: [Notes]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: note_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            isPinned: { type: boolean }
    responses:
      200: { description: OK }
      400: { description: isPinned missing }
      404: { description: Not found }
    """
    note = note_service.set_pin(g.current_user.id, note_id, _json_body())
    return api_response(out_schema.dump(note), "Note pin status updated.")


@bp.get("/search-notes")
def search_notes():
    """
    Case-insensitive search in title and content
    ---
    tags: [Notes]
    security:
      - Bearer: []
    parameters:
      - in: query
        name: query
        type: string
        required: true
    responses:
      200: { description: OK }
      400: { description: Search query is required }
    """
    notes = note_service.search_notes(g.current_user.id, request.args.get("query"))
    return api_response(out_list_schema.dump(notes), "Notes matching the search query retrieved.")


@bp.delete("/delete-note/<note_id>")
def delete_note(note_id: str):
    """
    Delete a note
    ---
    tags: [Notes]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: note_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    note_service.delete_note(g.current_user.id, note_id)
    return api_response({}, "Note deleted.")
