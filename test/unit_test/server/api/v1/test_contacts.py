"""API tests for contacts, interactions and documents."""

import pytest
from httpx import AsyncClient

from smartcrm.core.database.entities import ContactDocument, Interaction, InteractionType, Note
from smartcrm.server.schemas import SyncEventType

pytestmark = pytest.mark.asyncio


class TestContacts:
    async def test_create_contact_announces_stats(self, client: AsyncClient, company, channel):
        listener = channel.subscribe()

        response = await client.post(
            "/api/v1/contacts",
            json={"first_name": "Ada", "last_name": "Lovelace", "company_id": company.id},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["first_name"] == "Ada"
        assert data["company_id"] == company.id
        assert data["id"]

        event = listener.get_nowait()
        assert event.type == SyncEventType.STATS_UPDATED
        assert event.data == {"contact_id": data["id"]}
        assert event.source == "/api/v1/contacts"

    async def test_create_requires_first_name(self, client: AsyncClient):
        response = await client.post("/api/v1/contacts", json={"last_name": "Nobody"})

        assert response.status_code == 422

    async def test_get_contact(self, client: AsyncClient, contact):
        response = await client.get(f"/api/v1/contacts/{contact.id}")

        assert response.status_code == 200
        assert response.json()["email"] == "jane@acme.test"

    async def test_get_missing_contact(self, client: AsyncClient):
        response = await client.get("/api/v1/contacts/missing")

        assert response.status_code == 404
        assert response.json()["detail"] == "Contact missing not found"

    async def test_list_filters_by_company(self, client: AsyncClient, contact, company):
        await client.post("/api/v1/contacts", json={"first_name": "Freelancer"})

        all_contacts = (await client.get("/api/v1/contacts")).json()
        at_company = (await client.get("/api/v1/contacts", params={"company_id": company.id})).json()

        assert len(all_contacts) == 2
        assert [c["id"] for c in at_company] == [contact.id]

    async def test_list_paginates(self, client: AsyncClient):
        for name in ("A", "B", "C"):
            await client.post("/api/v1/contacts", json={"first_name": name})

        page = (await client.get("/api/v1/contacts", params={"limit": 2, "offset": 1})).json()

        assert len(page) == 2


class TestUpdateContact:
    async def test_patch_updates_only_given_fields(self, client: AsyncClient, contact, channel):
        listener = channel.subscribe()

        response = await client.patch(f"/api/v1/contacts/{contact.id}", json={"job_title": "CTO"})

        assert response.status_code == 200
        data = response.json()
        assert data["job_title"] == "CTO"
        assert data["first_name"] == "Jane"
        assert data["email"] == "jane@acme.test"

        event = listener.get_nowait()
        assert event.type == SyncEventType.CONTACT_UPDATED
        assert event.data == {"contact_id": contact.id}

    async def test_updated_contact_is_listed_first(self, client: AsyncClient, contact):
        await client.post("/api/v1/contacts", json={"first_name": "Later"})
        before = (await client.get("/api/v1/contacts")).json()

        await client.patch(f"/api/v1/contacts/{contact.id}", json={"phone": "+1 555 0100"})
        after = (await client.get("/api/v1/contacts")).json()

        assert before[0]["first_name"] == "Later"
        assert after[0]["id"] == contact.id

    async def test_null_first_name_is_rejected(self, client: AsyncClient, contact):
        response = await client.patch(f"/api/v1/contacts/{contact.id}", json={"first_name": None})

        assert response.status_code == 422

    async def test_null_optional_field_clears_it(self, client: AsyncClient, contact):
        response = await client.patch(f"/api/v1/contacts/{contact.id}", json={"email": None})

        assert response.status_code == 200
        assert response.json()["email"] is None

    async def test_patch_missing_contact(self, client: AsyncClient):
        response = await client.patch("/api/v1/contacts/missing", json={"job_title": "CTO"})

        assert response.status_code == 404
        assert response.json()["detail"] == "Contact missing not found"


class TestDeleteContact:
    async def test_delete_removes_contact_and_history(self, client: AsyncClient, session, contact, channel):
        interaction = Interaction(contact_id=contact.id, interaction_type=InteractionType.MEETING)
        note = Note(contact_id=contact.id, content="Likes espresso")
        document = ContactDocument(contact_id=contact.id, name="deck.pdf")
        session.add_all([interaction, note, document])
        await session.commit()
        ids = (interaction.id, note.id, document.id)
        listener = channel.subscribe()

        response = await client.delete(f"/api/v1/contacts/{contact.id}")

        assert response.status_code == 204
        assert (await client.get(f"/api/v1/contacts/{contact.id}")).status_code == 404
        assert await session.get(Interaction, ids[0]) is None
        assert await session.get(Note, ids[1]) is None
        assert await session.get(ContactDocument, ids[2]) is None

        event = listener.get_nowait()
        assert event.type == SyncEventType.STATS_UPDATED
        assert event.data == {"contact_id": contact.id}

    async def test_delete_missing_contact(self, client: AsyncClient, channel):
        listener = channel.subscribe()

        response = await client.delete("/api/v1/contacts/missing")

        assert response.status_code == 404
        assert listener.empty()


class TestInteractions:
    async def test_record_interaction(self, client: AsyncClient, contact, event, channel):
        listener = channel.subscribe("tab-b")

        response = await client.post(
            f"/api/v1/contacts/{contact.id}/interactions",
            json={"interaction_type": "meeting", "event_id": event.id, "summary": "Booth chat"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["contact_id"] == contact.id
        assert data["interaction_type"] == "meeting"
        assert data["interaction_date"]

        sync_event = listener.get_nowait()
        assert sync_event.type == SyncEventType.CONTACT_UPDATED
        assert sync_event.data == {"contact_id": contact.id, "interaction_id": data["id"]}

    async def test_sender_is_not_notified(self, client: AsyncClient, contact, channel):
        own_tab = channel.subscribe("tab-a")

        await client.post(
            f"/api/v1/contacts/{contact.id}/interactions",
            json={"interaction_type": "email"},
            headers={"X-Client-ID": "tab-a"},
        )

        assert own_tab.empty()

    async def test_list_newest_first(self, client: AsyncClient, contact):
        for date in ("2026-01-01T10:00:00", "2026-03-01T10:00:00", "2026-02-01T10:00:00"):
            await client.post(
                f"/api/v1/contacts/{contact.id}/interactions",
                json={"interaction_type": "email", "interaction_date": date},
            )

        response = await client.get(f"/api/v1/contacts/{contact.id}/interactions")

        dates = [i["interaction_date"][:10] for i in response.json()]
        assert dates == ["2026-03-01", "2026-02-01", "2026-01-01"]

    async def test_unknown_contact(self, client: AsyncClient):
        response = await client.post("/api/v1/contacts/missing/interactions", json={"interaction_type": "email"})
        assert response.status_code == 404

        response = await client.get("/api/v1/contacts/missing/interactions")
        assert response.status_code == 404

    async def test_invalid_interaction_type(self, client: AsyncClient, contact):
        response = await client.post(
            f"/api/v1/contacts/{contact.id}/interactions", json={"interaction_type": "telepathy"}
        )

        assert response.status_code == 422


class TestDocuments:
    async def test_attach_and_list(self, client: AsyncClient, contact):
        response = await client.post(
            f"/api/v1/contacts/{contact.id}/documents",
            json={"name": "deck.pdf", "file_type": "application/pdf", "summary": "Q3 roadmap"},
        )

        assert response.status_code == 201
        assert response.json()["contact_id"] == contact.id

        listed = (await client.get(f"/api/v1/contacts/{contact.id}/documents")).json()
        assert [d["name"] for d in listed] == ["deck.pdf"]

    async def test_unknown_contact(self, client: AsyncClient):
        response = await client.post("/api/v1/contacts/missing/documents", json={"name": "x"})

        assert response.status_code == 404
