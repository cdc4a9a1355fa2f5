"""
Pipedrive API Adapter for MCP Server
Persons and organizations; the API token comes from the environment and is
sent as the api_token query parameter
"""

from typing import Dict, Tuple

from pydantic import Field

from ..validation import ToolInput
from .base_adapter import BaseAdapter, ToolConfig
from .endpoint import AuthStyle, EndpointDescriptor

PIPEDRIVE_API_BASE = "https://api.pipedrive.com/v1"

# Replies are the raw Pipedrive body, not just its data field
RAW_REPLY = " (returns the raw Pipedrive response: success flag, data and additional_data)"


class NoInput(ToolInput):
    pass


class PersonIdInput(ToolInput):
    person_id: int = Field(..., description="Pipedrive person ID")


class OrganizationIdInput(ToolInput):
    organization_id: int = Field(..., description="Pipedrive organization ID")


class SearchTermInput(ToolInput):
    term: str = Field(..., description="Search term")


PROMPTS = {
    'getAllPersons': (
        "List all persons in Pipedrive",
        "Please list all persons in my Pipedrive account, showing their name, email, phone, and organization."
    ),
    'analysePersons': (
        "Analyze persons by organization",
        "Analyze all the persons in my Pipedrive account, grouping them by organization "
        "and providing a count for each organization."
    ),
}


class PipedriveAdapter(BaseAdapter):
    """Pipedrive adapter using the process-wide PIPEDRIVE_API_TOKEN"""

    platform_name = "pipedrive"
    display_name = "pipedrive-mcp-server"
    default_base_url = PIPEDRIVE_API_BASE
    credential_env = "PIPEDRIVE_API_TOKEN"

    def _endpoint(self, path: str, **kwargs) -> EndpointDescriptor:
        return EndpointDescriptor(method='GET', base_url=self.base_url, path=path,
                                  auth=AuthStyle.QUERY, auth_param='api_token',
                                  credential_field=None, **kwargs)

    def _setup_tools(self) -> Dict[str, ToolConfig]:
        person_tools = {
            'getAllPersons': ToolConfig(
                description="Get all persons from Pipedrive" + RAW_REPLY,
                input_model=NoInput,
                endpoint=self._endpoint('/persons'),
            ),
            'getPersonByID': ToolConfig(
                description="Get a specific person by Pipedrive ID" + RAW_REPLY,
                input_model=PersonIdInput,
                endpoint=self._endpoint('/persons/{personId}'),
            ),
            'searchPersons': ToolConfig(
                description="Search persons by search term" + RAW_REPLY,
                input_model=SearchTermInput,
                endpoint=self._endpoint('/persons/search', query={'term': 'term'}),
            ),
        }

        organization_tools = {
            'getAllOrganizations': ToolConfig(
                description="Get all organizations from Pipedrive" + RAW_REPLY,
                input_model=NoInput,
                endpoint=self._endpoint('/organizations'),
            ),
            'getOrganizationByID': ToolConfig(
                description="Get a specific organization by Pipedrive ID" + RAW_REPLY,
                input_model=OrganizationIdInput,
                endpoint=self._endpoint('/organizations/{organizationId}'),
            ),
            'searchOrganizations': ToolConfig(
                description="Search organizations by search term" + RAW_REPLY,
                input_model=SearchTermInput,
                endpoint=self._endpoint('/organizations/search', query={'term': 'term'}),
            ),
        }

        return {
            **person_tools,
            **organization_tools
        }

    def get_prompts(self) -> Dict[str, Tuple[str, str]]:
        return dict(PROMPTS)
