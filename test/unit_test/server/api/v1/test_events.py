"""API tests for events and companies."""

import pytest
from httpx import AsyncClient

from smartcrm.core.database.entities import Interaction, InteractionType, Note
from smartcrm.server.schemas import SyncEventType

pytestmark = pytest.mark.asyncio


class TestEvents:
    async def test_create_event_defaults(self, client: AsyncClient, channel):
        listener = channel.subscribe()

        response = await client.post(
            "/api/v1/events", json={"name": "Sales Summit", "start_date": "2026-09-01T09:00:00"}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["event_type"] == "meeting"
        assert data["status"] == "upcoming"

        sync_event = listener.get_nowait()
        assert sync_event.type == SyncEventType.EVENT_UPDATED
        assert sync_event.data == {"event_id": data["id"]}

    async def test_list_latest_first(self, client: AsyncClient):
        for name, start in (("old", "2025-01-01T00:00:00"), ("new", "2026-01-01T00:00:00")):
            await client.post(
                "/api/v1/events", json={"name": name, "start_date": start, "event_type": "conference"}
            )

        response = await client.get("/api/v1/events")

        assert [e["name"] for e in response.json()] == ["new", "old"]

    async def test_get_event(self, client: AsyncClient, event):
        response = await client.get(f"/api/v1/events/{event.id}")

        assert response.status_code == 200
        assert response.json()["name"] == "RoboExpo 2026"

    async def test_get_missing_event(self, client: AsyncClient):
        response = await client.get("/api/v1/events/missing")

        assert response.status_code == 404
        assert response.json()["detail"] == "Event missing not found"

    async def test_invalid_event_type(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/events", json={"name": "x", "start_date": "2026-01-01T00:00:00", "event_type": "party"}
        )

        assert response.status_code == 422


class TestUpdateEvent:
    async def test_patch_updates_only_given_fields(self, client: AsyncClient, event, channel):
        listener = channel.subscribe()

        response = await client.patch(f"/api/v1/events/{event.id}", json={"status": "ongoing"})

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ongoing"
        assert data["name"] == "RoboExpo 2026"
        assert data["location"] == "Berlin"

        sync_event = listener.get_nowait()
        assert sync_event.type == SyncEventType.EVENT_UPDATED
        assert sync_event.data == {"event_id": event.id}

    @pytest.mark.parametrize("field", ["name", "start_date", "event_type", "status"])
    async def test_null_required_field_is_rejected(self, client: AsyncClient, event, field):
        response = await client.patch(f"/api/v1/events/{event.id}", json={field: None})

        assert response.status_code == 422

    async def test_invalid_status(self, client: AsyncClient, event):
        response = await client.patch(f"/api/v1/events/{event.id}", json={"status": "cancelled"})

        assert response.status_code == 422

    async def test_patch_missing_event(self, client: AsyncClient):
        response = await client.patch("/api/v1/events/missing", json={"name": "x"})

        assert response.status_code == 404
        assert response.json()["detail"] == "Event missing not found"


class TestDeleteEvent:
    async def test_delete_unlinks_notes_and_interactions(self, client: AsyncClient, session, contact, event, channel):
        interaction = Interaction(
            contact_id=contact.id, event_id=event.id, interaction_type=InteractionType.CAPTURE
        )
        note = Note(contact_id=contact.id, event_id=event.id, content="Met at the booth")
        session.add_all([interaction, note])
        await session.commit()
        listener = channel.subscribe()

        response = await client.delete(f"/api/v1/events/{event.id}")

        assert response.status_code == 204
        assert (await client.get(f"/api/v1/events/{event.id}")).status_code == 404
        await session.refresh(interaction)
        await session.refresh(note)
        assert interaction.event_id is None
        assert note.event_id is None
        assert note.contact_id == contact.id

        sync_event = listener.get_nowait()
        assert sync_event.type == SyncEventType.EVENT_UPDATED
        assert sync_event.data == {"event_id": event.id}

    async def test_delete_missing_event(self, client: AsyncClient):
        response = await client.delete("/api/v1/events/missing")

        assert response.status_code == 404


class TestCompanies:
    async def test_create_and_list(self, client: AsyncClient):
        for name in ("Zeta", "Alpha"):
            response = await client.post("/api/v1/companies", json={"name": name, "domain": f"{name.lower()}.test"})
            assert response.status_code == 201

        listed = (await client.get("/api/v1/companies")).json()

        assert [c["name"] for c in listed] == ["Alpha", "Zeta"]
        assert listed[0]["domain"] == "alpha.test"
