"""API tests for smart note actions and note CRUD."""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from sqlmodel import select

from smartcrm.core.database.entities import Note, NoteType
from smartcrm.server.api.v1 import notes as notes_api
from smartcrm.server.schemas import NoteAnalysis, SyncEventType

pytestmark = pytest.mark.asyncio


class TestProcessSmartNote:
    async def test_returns_suggestion(self, client: AsyncClient, contact, event, extractor):
        extractor.error = None
        extractor.output = NoteAnalysis(
            formatted_content="Met Jane at RoboExpo.", contact_id=contact.id, event_id=event.id, confidence=0.7
        )

        response = await client.post("/api/v1/notes/smart/process", json={"content": "met jane at expo"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["original_content"] == "met jane at expo"
        assert body["data"]["formatted_content"] == "Met Jane at RoboExpo."
        assert body["data"]["contact_name"] == "Jane Doe (Acme Corp)"
        assert body["data"]["event_name"] == "RoboExpo 2026"
        assert body["data"]["confidence"] == 0.7

    async def test_fallback_when_ai_unavailable(self, client: AsyncClient):
        response = await client.post("/api/v1/notes/smart/process", json={"content": "raw note"})

        body = response.json()
        assert body["success"] is True
        assert body["data"]["original_content"] == "raw note"
        assert body["data"]["formatted_content"] == "raw note"
        assert body["data"]["confidence"] == 0.0
        assert body["data"].get("contact_id") is None

    async def test_processing_does_not_save(self, client: AsyncClient, session):
        await client.post("/api/v1/notes/smart/process", json={"content": "raw note"})

        assert (await session.execute(select(Note))).scalars().all() == []

    async def test_unexpected_failure(self, client: AsyncClient):
        with patch.object(
            notes_api.NoteService, "process_smart_note", AsyncMock(side_effect=RuntimeError("boom"))
        ):
            response = await client.post("/api/v1/notes/smart/process", json={"content": "x"})

        assert response.status_code == 200
        assert response.json() == {"success": False, "error": "Failed to process note"}


class TestSaveSmartNote:
    async def test_saves_and_notifies(self, client: AsyncClient, session, contact, event, channel):
        other_tab = channel.subscribe("tab-b")
        own_tab = channel.subscribe("tab-a")

        response = await client.post(
            "/api/v1/notes/smart",
            json={
                "original_content": "met jane",
                "formatted_content": "Met Jane.",
                "contact_id": contact.id,
                "contact_name": "Jane Doe (Acme Corp)",
                "event_id": event.id,
                "event_name": "RoboExpo 2026",
                "confidence": 0.9,
            },
            headers={"X-Client-ID": "tab-a"},
        )

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["data"]["content"] == "Met Jane."
        assert body["data"]["note_type"] == "smart_text"
        assert body["data"]["contact_id"] == contact.id

        stored = (await session.execute(select(Note))).scalars().one()
        assert stored.note_type == NoteType.SMART_TEXT

        assert own_tab.empty()
        first = other_tab.get_nowait()
        second = other_tab.get_nowait()
        assert first.type == SyncEventType.CONTACT_UPDATED
        assert first.data == {"contact_id": contact.id, "note_id": stored.id}
        assert first.source == "/api/v1/notes/smart"
        assert second.type == SyncEventType.EVENT_UPDATED

    async def test_unlinked_note_emits_nothing(self, client: AsyncClient, channel):
        listener = channel.subscribe()

        response = await client.post(
            "/api/v1/notes/smart", json={"original_content": "x", "formatted_content": "x"}
        )

        assert response.json()["success"] is True
        assert listener.empty()

    async def test_save_failure(self, client: AsyncClient):
        with patch.object(notes_api.NoteService, "save_note", AsyncMock(side_effect=RuntimeError("db down"))):
            response = await client.post(
                "/api/v1/notes/smart", json={"original_content": "x", "formatted_content": "x"}
            )

        assert response.status_code == 200
        assert response.json() == {"success": False, "error": "Failed to save note"}


class TestNoteCrud:
    async def test_create_text_note(self, client: AsyncClient, contact, channel):
        listener = channel.subscribe()

        response = await client.post("/api/v1/notes", json={"contact_id": contact.id, "content": "Likes tea"})

        assert response.status_code == 201
        data = response.json()
        assert data["content"] == "Likes tea"
        assert data["note_type"] == "text"
        assert listener.get_nowait().type == SyncEventType.CONTACT_UPDATED

    async def test_voice_note_keeps_audio_in_source_url(self, client: AsyncClient, contact):
        response = await client.post(
            "/api/v1/notes",
            json={
                "contact_id": contact.id,
                "content": "Voice memo",
                "note_type": "voice",
                "audio_data": "data:audio/webm;base64,AAAA",
            },
        )

        data = response.json()
        assert data["note_type"] == "voice"
        assert data["source_url"] == "data:audio/webm;base64,AAAA"
        assert "audio_data" not in data

    async def test_list_filters_by_contact(self, client: AsyncClient, contact, event):
        await client.post("/api/v1/notes", json={"contact_id": contact.id, "content": "a"})
        await client.post("/api/v1/notes", json={"event_id": event.id, "content": "b"})

        by_contact = (await client.get("/api/v1/notes", params={"contact_id": contact.id})).json()
        by_event = (await client.get("/api/v1/notes", params={"event_id": event.id})).json()
        everything = (await client.get("/api/v1/notes")).json()

        assert [n["content"] for n in by_contact] == ["a"]
        assert [n["content"] for n in by_event] == ["b"]
        assert len(everything) == 2

    async def test_patch_updates_only_given_fields(self, client: AsyncClient, contact):
        created = (await client.post("/api/v1/notes", json={"contact_id": contact.id, "content": "old"})).json()

        response = await client.patch(f"/api/v1/notes/{created['id']}", json={"content": "new"})

        assert response.status_code == 200
        assert response.json()["content"] == "new"
        assert response.json()["contact_id"] == contact.id

    async def test_patch_missing_note(self, client: AsyncClient):
        response = await client.patch("/api/v1/notes/missing", json={"content": "x"})

        assert response.status_code == 404
        assert response.json()["detail"] == "Note missing not found"

    @pytest.mark.parametrize("field", ["content", "note_type"])
    async def test_patch_rejects_null_required_field(self, client: AsyncClient, contact, field):
        created = (await client.post("/api/v1/notes", json={"contact_id": contact.id, "content": "keep"})).json()

        response = await client.patch(f"/api/v1/notes/{created['id']}", json={field: None})

        assert response.status_code == 422
        stored = (await client.get("/api/v1/notes", params={"contact_id": contact.id})).json()
        assert stored[0]["content"] == "keep"

    async def test_patch_can_unlink_event(self, client: AsyncClient, contact, event):
        created = (
            await client.post("/api/v1/notes", json={"contact_id": contact.id, "event_id": event.id, "content": "x"})
        ).json()

        response = await client.patch(f"/api/v1/notes/{created['id']}", json={"event_id": None})

        assert response.status_code == 200
        assert response.json()["event_id"] is None
