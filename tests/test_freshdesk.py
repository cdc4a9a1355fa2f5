"""Freshdesk and Freshchat tools against a fake vendor."""

import base64

import pytest

from crm_mcp.adapters import FreshdeskAdapter

from .conftest import echo_with_id

ACCOUNT = {"apiKey": "fd-key", "subdomain": "acme"}


@pytest.fixture
def freshdesk(fake_vendor, make_adapter):
    def _make(**vendor_kwargs):
        vendor = fake_vendor(**vendor_kwargs)
        return vendor, make_adapter(FreshdeskAdapter, vendor).build_registry()
    return _make


def test_tool_set(freshdesk):
    _, registry = freshdesk()

    assert len(registry) == 12
    assert "freshdesk-create-ticket" in registry
    assert "freshchat-send-message" in registry


@pytest.mark.asyncio
async def test_list_tickets_uses_basic_auth(freshdesk):
    vendor, registry = freshdesk(json_body=[])

    envelope = await registry.invoke("freshdesk-list-tickets", {**ACCOUNT, "filter": "status:2"})

    assert envelope.is_error is False
    assert envelope.text == "[]"
    request = vendor.last
    assert request.url.host == "acme.freshdesk.com"
    assert request.url.path == "/api/v2/tickets"
    assert request.url.params["per_page"] == "30"
    assert request.url.params["filter"] == "status:2"
    expected = base64.b64encode(b"fd-key:X").decode()
    assert request.headers["Authorization"] == f"Basic {expected}"


@pytest.mark.asyncio
async def test_subdomain_given_as_url(freshdesk):
    vendor, registry = freshdesk(json_body={"id": 5})

    await registry.invoke("freshdesk-get-ticket", {
        "apiKey": "fd-key", "subdomain": "https://acme.freshdesk.com/", "ticketId": 5})

    assert str(vendor.last.url) == "https://acme.freshdesk.com/api/v2/tickets/5"


@pytest.mark.asyncio
async def test_create_ticket(freshdesk):
    vendor, registry = freshdesk(handler=echo_with_id(None, 101))

    envelope = await registry.invoke("freshdesk-create-ticket", {
        **ACCOUNT, "subject": "Printer", "description": "On fire", "email": "ann@example.com"})

    assert envelope.text.startswith("Ticket created successfully with ID: 101\n\n")
    assert vendor.last_json() == {
        "subject": "Printer", "description": "On fire", "email": "ann@example.com", "priority": 2, "status": 2}


@pytest.mark.asyncio
async def test_create_ticket_priority_out_of_range(freshdesk):
    vendor, registry = freshdesk(json_body={})

    envelope = await registry.invoke("freshdesk-create-ticket", {
        **ACCOUNT, "subject": "s", "description": "d", "email": "ann@example.com", "priority": 9})

    assert envelope.is_error
    assert "priority" in envelope.text
    assert vendor.requests == []


@pytest.mark.asyncio
async def test_update_ticket_sends_only_given_fields(freshdesk):
    vendor, registry = freshdesk(json_body={"id": 7, "status": 4})

    envelope = await registry.invoke("freshdesk-update-ticket", {**ACCOUNT, "ticketId": 7, "status": 4})

    assert envelope.text.startswith("Ticket 7 updated successfully")
    assert vendor.last.method == "PUT"
    assert vendor.last_json() == {"status": 4}


@pytest.mark.asyncio
async def test_add_note_is_private_by_default(freshdesk):
    vendor, registry = freshdesk(json_body={"id": 1})

    envelope = await registry.invoke("freshdesk-add-note", {**ACCOUNT, "ticketId": 7, "body": "Called back"})

    assert envelope.text.startswith("Note added successfully to ticket 7")
    assert vendor.last.url.path == "/api/v2/tickets/7/notes"
    assert vendor.last_json() == {"body": "Called back", "private": True}


@pytest.mark.asyncio
async def test_create_contact_with_company_name(freshdesk):
    vendor, registry = freshdesk(handler=echo_with_id(None, 55))

    await registry.invoke("freshdesk-create-contact", {
        **ACCOUNT, "name": "Ann", "email": "ann@example.com", "mobilePhone": "555", "companyName": "Acme"})

    body = vendor.last_json()
    assert "company_id" in body
    assert body["company_id"] is None
    assert body["other_companies"] == [{"name": "Acme"}]
    assert body["mobile"] == "555"
    assert "companyName" not in body


@pytest.mark.asyncio
async def test_create_contact_without_company(freshdesk):
    vendor, registry = freshdesk(handler=echo_with_id(None, 56))

    await registry.invoke("freshdesk-create-contact", {**ACCOUNT, "name": "Ann", "email": "ann@example.com"})

    assert vendor.last_json() == {"name": "Ann", "email": "ann@example.com"}


@pytest.mark.asyncio
async def test_freshchat_send_message(freshdesk):
    vendor, registry = freshdesk(json_body={"id": "m1"})

    envelope = await registry.invoke("freshchat-send-message", {
        "apiKey": "fc-key", "domain": "https://api.freshchat.com", "conversationId": "conv-1",
        "actorId": "agent-7", "message": "Hi there"})

    assert envelope.text.startswith("Message sent successfully to conversation conv-1")
    assert str(vendor.last.url) == "https://api.freshchat.com/v2/conversations/conv-1/messages"
    assert vendor.last.headers["Authorization"] == "Bearer fc-key"
    assert vendor.last_json() == {
        "actor_type": "agent",
        "actor_id": "agent-7",
        "message_type": "normal",
        "message": {"type": "text", "text": "Hi there"},
    }


@pytest.mark.asyncio
async def test_freshchat_status_filter_is_checked(freshdesk):
    vendor, registry = freshdesk(json_body={})

    envelope = await registry.invoke("freshchat-list-conversations", {
        "apiKey": "fc-key", "domain": "api.freshchat.com", "status": "archived"})

    assert envelope.is_error
    assert vendor.requests == []


@pytest.mark.asyncio
async def test_create_contact_drops_empty_phone(freshdesk):
    vendor, registry = freshdesk(handler=echo_with_id(None, 57))

    await registry.invoke("freshdesk-create-contact", {
        **ACCOUNT, "name": "n", "email": "a@b.com", "phone": ""})

    assert vendor.last_json() == {"name": "n", "email": "a@b.com"}


@pytest.mark.asyncio
async def test_freshchat_domain_with_port(freshdesk):
    vendor, registry = freshdesk(json_body={"id": "c"})

    envelope = await registry.invoke("freshchat-get-conversation", {
        "apiKey": "fc-key", "domain": "localhost:8080", "conversationId": "c"})

    assert envelope.is_error is False
    assert str(vendor.last.url) == "https://localhost:8080/v2/conversations/c"


@pytest.mark.asyncio
@pytest.mark.parametrize("domain", ["evil.com/steal?x=", "api.freshchat.com:port", "user@api.freshchat.com"])
async def test_freshchat_domain_must_be_a_host(freshdesk, domain):
    vendor, registry = freshdesk(json_body={})

    envelope = await registry.invoke("freshchat-get-conversation", {
        "apiKey": "fc-key", "domain": domain, "conversationId": "c"})

    assert envelope.is_error
    assert "domain" in envelope.text
    assert vendor.requests == []


@pytest.mark.asyncio
@pytest.mark.parametrize("subdomain", ["acme/../admin", "acme.example.com", "acme:8080"])
async def test_subdomain_must_be_a_single_label(freshdesk, subdomain):
    vendor, registry = freshdesk(json_body={})

    envelope = await registry.invoke("freshdesk-get-ticket", {
        "apiKey": "fd-key", "subdomain": subdomain, "ticketId": 1})

    assert envelope.is_error
    assert "subdomain" in envelope.text
    assert vendor.requests == []
