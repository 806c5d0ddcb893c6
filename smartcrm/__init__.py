"""SmartCRM.

Backend services for a CRM web application that keeps track of contacts,
companies, events and the notes and interactions that connect them.

High-level architecture
-----------------------

- ``smartcrm.core``: logging, monitoring and the SQLModel persistence layer
  (entities, engine and session management).
- ``smartcrm.ai``: a thin structured-extraction wrapper around Pydantic AI.
  Every AI feature degrades to a deterministic result when no model is
  configured or the model fails.
- ``smartcrm.server``: the FastAPI application. Besides plain CRUD endpoints
  it exposes three *actions* that always answer with a
  ``{success, data | error}`` envelope:

  - relationship memory for a contact,
  - smart note processing (link free text to a contact and an event),
  - smart note saving.

  A process-wide ``crm_sync`` channel broadcasts ``CONTACT_UPDATED``,
  ``EVENT_UPDATED`` and ``STATS_UPDATED`` notifications to every open browser
  tab over Server-Sent Events.
"""
