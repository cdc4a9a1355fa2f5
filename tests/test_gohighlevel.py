"""GoHighLevel tools end to end against a fake vendor."""

import json

import pytest

from crm_mcp.adapters import GoHighLevelAdapter

from .conftest import echo_with_id

BASE = "https://rest.gohighlevel.com/v1"


@pytest.fixture
def ghl(fake_vendor, make_adapter):
    def _make(**vendor_kwargs):
        vendor = fake_vendor(**vendor_kwargs)
        return vendor, make_adapter(GoHighLevelAdapter, vendor).build_registry()
    return _make


def test_tool_set(ghl):
    _, registry = ghl()

    assert [tool.name for tool in registry.list_tools()] == [
        'getContacts', 'getContact', 'createContact', 'updateContact', 'addContactTags',
        'removeContactTags', 'getTasks', 'createTask', 'updateTask', 'deleteTask',
        'getOpportunities', 'createOpportunity', 'getPipelines', 'createCalendarEvent', 'getCalendars',
    ]
    assert registry.sealed


@pytest.mark.asyncio
async def test_create_contact_confirms_with_id(ghl):
    vendor, registry = ghl(handler=echo_with_id("contact", "c1"))

    envelope = await registry.invoke("createContact", {"apiKey": "k", "contactData": {"email": "a@b.com"}})

    assert envelope.is_error is False
    first_line, rest = envelope.text.split("\n\n", 1)
    assert first_line == "Contact created successfully with ID: c1"
    assert json.loads(rest) == {"contact": {"email": "a@b.com", "id": "c1"}}

    request = vendor.last
    assert request.method == "POST"
    assert str(request.url) == f"{BASE}/contacts"
    assert request.headers["Authorization"] == "Bearer k"
    assert vendor.last_json() == {"email": "a@b.com"}


@pytest.mark.asyncio
async def test_create_contact_needs_email_or_phone(ghl):
    vendor, registry = ghl(json_body={})

    envelope = await registry.invoke("createContact", {"apiKey": "k", "contactData": {"firstName": "Ann"}})

    assert envelope.is_error
    assert "Either email or phone must be provided" in envelope.text
    assert vendor.requests == []


@pytest.mark.asyncio
async def test_create_contact_rejects_bad_email(ghl):
    vendor, registry = ghl(json_body={})

    envelope = await registry.invoke("createContact", {"apiKey": "k", "contactData": {"email": "nope"}})

    assert envelope.is_error
    assert vendor.requests == []


@pytest.mark.asyncio
async def test_get_contacts_sends_only_present_parameters(ghl):
    vendor, registry = ghl(json_body={"contacts": []})

    await registry.invoke("getContacts", {"apiKey": "k"})

    assert str(vendor.last.url) == f"{BASE}/contacts?page=1&limit=20"


@pytest.mark.asyncio
async def test_get_contact_requires_id(ghl):
    vendor, registry = ghl(json_body={})

    envelope = await registry.invoke("getContact", {"apiKey": "k"})

    assert envelope.is_error
    assert "contactId" in envelope.text
    assert vendor.requests == []


@pytest.mark.asyncio
async def test_remove_tags_is_delete_with_body(ghl):
    vendor, registry = ghl(json_body={"tags": []})

    await registry.invoke("removeContactTags", {"apiKey": "k", "contactId": "c1", "tags": ["vip"]})

    assert vendor.last.method == "DELETE"
    assert str(vendor.last.url) == f"{BASE}/contacts/c1/tags"
    assert vendor.last_json() == {"tags": ["vip"]}


@pytest.mark.asyncio
async def test_update_contact_confirms_with_input_id(ghl):
    vendor, registry = ghl(json_body={"contact": {"id": "c1"}})

    envelope = await registry.invoke("updateContact", {
        "apiKey": "k", "contactId": "c1", "contactData": {"firstName": "Ann"}})

    assert envelope.text.startswith("Contact c1 updated successfully\n\n")
    assert vendor.last.method == "PUT"
    assert vendor.last_json() == {"firstName": "Ann"}


@pytest.mark.asyncio
async def test_delete_task_with_empty_response(ghl):
    vendor, registry = ghl(status_code=204)

    envelope = await registry.invoke("deleteTask", {"apiKey": "k", "taskId": "t1"})

    assert envelope.is_error is False
    assert envelope.text.startswith("Task t1 deleted successfully\n\n")
    assert vendor.last.content == b""


@pytest.mark.asyncio
async def test_create_task_sends_defaults(ghl):
    vendor, registry = ghl(handler=echo_with_id("task", "t1"))

    envelope = await registry.invoke("createTask", {
        "apiKey": "k", "taskData": {"title": "Call", "dueDate": "2024-01-01T10:00:00Z"}})

    assert envelope.text.startswith("Task created successfully with ID: t1")
    assert vendor.last_json() == {"title": "Call", "dueDate": "2024-01-01T10:00:00Z", "completed": False}


@pytest.mark.asyncio
async def test_opportunity_filters(ghl):
    vendor, registry = ghl(json_body={"opportunities": []})

    await registry.invoke("getOpportunities", {"apiKey": "k", "pipelineId": "p1"})

    assert str(vendor.last.url) == f"{BASE}/opportunities?pipelineId=p1&page=1&limit=20"


@pytest.mark.asyncio
async def test_confirmation_omitted_without_identifier(ghl):
    _, registry = ghl(json_body={"status": "queued"})

    envelope = await registry.invoke("createContact", {"apiKey": "k", "contactData": {"phone": "+15550100"}})

    assert envelope.is_error is False
    assert json.loads(envelope.text) == {"status": "queued"}


@pytest.mark.asyncio
async def test_empty_search_query_is_not_sent(ghl):
    vendor, registry = ghl(json_body={"contacts": []})

    await registry.invoke("getContacts", {"apiKey": "k", "query": ""})

    assert str(vendor.last.url) == f"{BASE}/contacts?page=1&limit=20"
