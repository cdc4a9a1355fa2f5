"""FastMCP binding: tools and prompts reach an MCP client."""

import json

import pytest
from fastmcp import Client

from crm_mcp.adapters import PipedriveAdapter
from crm_mcp.server import create_server


@pytest.fixture
def server(fake_vendor, make_adapter):
    vendor = fake_vendor(json_body={"success": True, "data": {"id": 7}})
    adapter = make_adapter(PipedriveAdapter, vendor, credential="pd-token")
    return vendor, create_server(adapter)


@pytest.mark.asyncio
async def test_tools_and_prompts_are_listed(server):
    _, mcp = server

    async with Client(mcp) as client:
        tools = await client.list_tools()
        prompts = await client.list_prompts()

    assert [tool.name for tool in tools] == [
        "getAllPersons", "getPersonByID", "searchPersons",
        "getAllOrganizations", "getOrganizationByID", "searchOrganizations",
    ]
    by_name = {tool.name: tool for tool in tools}
    assert by_name["getPersonByID"].inputSchema["required"] == ["personId"]
    assert {prompt.name for prompt in prompts} == {"getAllPersons", "analysePersons"}


@pytest.mark.asyncio
async def test_call_tool(server):
    vendor, mcp = server

    async with Client(mcp) as client:
        result = await client.call_tool_mcp("getPersonByID", {"personId": 7})

    assert result.isError is False
    assert json.loads(result.content[0].text) == {"success": True, "data": {"id": 7}}
    assert len(vendor.requests) == 1


@pytest.mark.asyncio
async def test_call_tool_with_invalid_arguments(server):
    vendor, mcp = server

    async with Client(mcp) as client:
        result = await client.call_tool_mcp("getPersonByID", {})

    assert result.isError is True
    assert "personId" in result.content[0].text
    assert vendor.requests == []
