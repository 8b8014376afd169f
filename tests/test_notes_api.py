"""Tests for the /api/v1/notes endpoints (all behind the auth gate)."""

import json
import uuid

import pytest

from services import auth as auth_service

BASE = "/api/v1/notes"


@pytest.fixture
def note(client, auth_headers):
    response = client.post(
        f"{BASE}/add-note",
        headers=auth_headers,
        json={"title": "Groceries", "content": "Milk and eggs", "tags": ["home"]},
    )
    assert response.status_code == 201
    return json.loads(response.data)["data"]


@pytest.fixture
def other_headers(app, settings):
    auth_service.register({"email": "b@x.com", "fullname": "B", "password": "pw123456"})
    result = auth_service.login({"email": "b@x.com", "password": "pw123456"}, settings)
    return {"Authorization": f"Bearer {result.tokens.access_token}"}


class TestNotesRequireAuth:
    @pytest.mark.parametrize("method, path", [
        ("get", "/get-all-notes"),
        ("post", "/add-note"),
        ("patch", f"/edit-note/{uuid.uuid4()}"),
        ("patch", f"/update-pin/{uuid.uuid4()}"),
        ("get", "/search-notes?query=x"),
        ("delete", f"/delete-note/{uuid.uuid4()}"),
    ])
    def test_unauthenticated(self, client, method, path):
        response = getattr(client, method)(f"{BASE}{path}")
        assert response.status_code == 401
        assert json.loads(response.data)["success"] is False


class TestAddNote:
    def test_add_note(self, note, user):
        assert note["title"] == "Groceries"
        assert note["tags"] == ["home"]
        assert note["isPinned"] is False
        assert note["userId"] == user.id

    def test_tags_default_to_empty(self, client, auth_headers):
        response = client.post(f"{BASE}/add-note", headers=auth_headers, json={"title": "T", "content": "C"})
        assert json.loads(response.data)["data"]["tags"] == []

    @pytest.mark.parametrize("payload", [
        {"content": "C"},
        {"title": "T"},
        {"title": "  ", "content": "C"},
        {"title": "T", "content": "C", "tags": "not-a-list"},
    ])
    def test_invalid_note(self, client, auth_headers, payload):
        response = client.post(f"{BASE}/add-note", headers=auth_headers, json=payload)
        assert response.status_code == 400


class TestListAndSearch:
    def test_pinned_first(self, client, auth_headers, note):
        pinned = client.post(
            f"{BASE}/add-note", headers=auth_headers, json={"title": "Pinned", "content": "x", "isPinned": True}
        )
        assert pinned.status_code == 201
        response = client.get(f"{BASE}/get-all-notes", headers=auth_headers)
        data = json.loads(response.data)["data"]
        assert [n["title"] for n in data] == ["Pinned", "Groceries"]

    def test_list_is_scoped_to_owner(self, client, note, other_headers):
        response = client.get(f"{BASE}/get-all-notes", headers=other_headers)
        assert json.loads(response.data)["data"] == []

    def test_search_is_case_insensitive(self, client, auth_headers, note):
        response = client.get(f"{BASE}/search-notes", headers=auth_headers, query_string={"query": "EGGS"})
        assert response.status_code == 200
        assert [n["id"] for n in json.loads(response.data)["data"]] == [note["id"]]

    def test_search_treats_wildcards_literally(self, client, auth_headers, note):
        response = client.get(f"{BASE}/search-notes", headers=auth_headers, query_string={"query": "%"})
        assert json.loads(response.data)["data"] == []

    def test_search_requires_query(self, client, auth_headers):
        response = client.get(f"{BASE}/search-notes", headers=auth_headers)
        assert response.status_code == 400


class TestEditNote:
    def test_edit_title(self, client, auth_headers, note):
        response = client.patch(f"{BASE}/edit-note/{note['id']}", headers=auth_headers, json={"title": "Shopping"})
        assert response.status_code == 200
        data = json.loads(response.data)["data"]
        assert data["title"] == "Shopping"
        assert data["content"] == "Milk and eggs"

    def test_unpin_through_edit(self, client, auth_headers, note):
        client.patch(f"{BASE}/update-pin/{note['id']}", headers=auth_headers, json={"isPinned": True})
        response = client.patch(f"{BASE}/edit-note/{note['id']}", headers=auth_headers, json={"isPinned": False})
        assert response.status_code == 200
        assert json.loads(response.data)["data"]["isPinned"] is False

    def test_no_changes(self, client, auth_headers, note):
        response = client.patch(f"{BASE}/edit-note/{note['id']}", headers=auth_headers, json={"title": None})
        assert response.status_code == 400
        assert json.loads(response.data)["message"] == "No changes provided"

    def test_invalid_id(self, client, auth_headers):
        response = client.patch(f"{BASE}/edit-note/not-a-uuid", headers=auth_headers, json={"title": "x"})
        assert response.status_code == 400

    def test_someone_elses_note(self, client, note, other_headers):
        response = client.patch(f"{BASE}/edit-note/{note['id']}", headers=other_headers, json={"title": "x"})
        assert response.status_code == 404


class TestPinAndDelete:
    def test_pin(self, client, auth_headers, note):
        response = client.patch(f"{BASE}/update-pin/{note['id']}", headers=auth_headers, json={"isPinned": True})
        assert json.loads(response.data)["data"]["isPinned"] is True

    @pytest.mark.parametrize("payload", [{}, {"isPinned": None}])
    def test_pin_requires_value(self, client, auth_headers, note, payload):
        response = client.patch(f"{BASE}/update-pin/{note['id']}", headers=auth_headers, json=payload)
        assert response.status_code == 400

    def test_delete(self, client, auth_headers, note):
        response = client.delete(f"{BASE}/delete-note/{note['id']}", headers=auth_headers)
        assert response.status_code == 200
        again = client.delete(f"{BASE}/delete-note/{note['id']}", headers=auth_headers)
        assert again.status_code == 404

    def test_delete_unknown(self, client, auth_headers):
        response = client.delete(f"{BASE}/delete-note/{uuid.uuid4()}", headers=auth_headers)
        assert response.status_code == 404
