"""
HubSpot API Adapter for MCP Server
CRM v3 contacts and deals
"""

from typing import Any, Dict, List

from pydantic import Field

from ..validation import ToolInput
from .base_adapter import BaseAdapter, ToolConfig
from .endpoint import EndpointDescriptor

HUBSPOT_API_BASE = "https://api.hubapi.com/crm/v3"

DEFAULT_CONTACT_PROPERTIES = ["email", "firstname", "lastname"]
DEFAULT_DEAL_PROPERTIES = ["dealname", "amount", "dealstage"]


class HubspotInput(ToolInput):
    api_key: str = Field(..., description="Hubspot API key")


class ListContactsInput(HubspotInput):
    limit: int = Field(10, description="Number of contacts to return")
    properties: List[str] = Field(default_factory=lambda: list(DEFAULT_CONTACT_PROPERTIES),
                                  description="Contact properties to return")


class GetContactInput(HubspotInput):
    contact_id: str = Field(..., description="Contact ID")
    properties: List[str] = Field(default_factory=lambda: list(DEFAULT_CONTACT_PROPERTIES),
                                  description="Contact properties to return")


class CreateContactInput(HubspotInput):
    properties: Dict[str, str] = Field(..., description="Contact properties (e.g. email, firstname, lastname)")


class UpdateContactInput(HubspotInput):
    contact_id: str = Field(..., description="Contact ID")
    properties: Dict[str, str] = Field(..., description="Contact properties to update")


class SearchContactsInput(HubspotInput):
    query: str = Field(..., description="Search query")
    limit: int = Field(10, description="Number of contacts to return")
    properties: List[str] = Field(default_factory=lambda: list(DEFAULT_CONTACT_PROPERTIES),
                                  description="Contact properties to return")


class ListDealsInput(HubspotInput):
    limit: int = Field(10, description="Number of deals to return")
    properties: List[str] = Field(default_factory=lambda: list(DEFAULT_DEAL_PROPERTIES),
                                  description="Deal properties to return")


def _email_search(values: Dict[str, Any]) -> Dict[str, Any]:
    """Search body: contacts whose email contains the query token"""
    return {
        'filterGroups': [{
            'filters': [{
                'propertyName': 'email',
                'operator': 'CONTAINS_TOKEN',
                'value': values['query']
            }]
        }],
        'properties': values['properties'],
        'limit': values['limit']
    }


class HubspotAdapter(BaseAdapter):
    """HubSpot adapter; the private app token is supplied on every call"""

    platform_name = "hubspot"
    display_name = "Hubspot API Server"
    default_base_url = HUBSPOT_API_BASE

    def _endpoint(self, method: str, path: str, **kwargs) -> EndpointDescriptor:
        return EndpointDescriptor(method=method, base_url=self.base_url, path=path, **kwargs)

    def _setup_tools(self) -> Dict[str, ToolConfig]:
        return {
            'hubspot-list-contacts': ToolConfig(
                description="List HubSpot contacts",
                input_model=ListContactsInput,
                endpoint=self._endpoint('GET', '/objects/contacts',
                                        query={'limit': 'limit', 'properties': 'properties'}),
            ),
            'hubspot-get-contact': ToolConfig(
                description="Get a HubSpot contact by ID",
                input_model=GetContactInput,
                endpoint=self._endpoint('GET', '/objects/contacts/{contactId}',
                                        query={'properties': 'properties'}),
            ),
            'hubspot-create-contact': ToolConfig(
                description="Create a HubSpot contact",
                input_model=CreateContactInput,
                endpoint=self._endpoint('POST', '/objects/contacts', body={'properties': 'properties'},
                                        success_message="Contact created successfully with ID: {id}"),
            ),
            'hubspot-update-contact': ToolConfig(
                description="Update a HubSpot contact",
                input_model=UpdateContactInput,
                endpoint=self._endpoint('PATCH', '/objects/contacts/{contactId}',
                                        body={'properties': 'properties'},
                                        success_message="Contact {contactId} updated successfully"),
            ),
            'hubspot-search-contacts': ToolConfig(
                description="Search HubSpot contacts by email",
                input_model=SearchContactsInput,
                endpoint=self._endpoint('POST', '/objects/contacts/search', shape_body=_email_search),
            ),
            'hubspot-list-deals': ToolConfig(
                description="List HubSpot deals",
                input_model=ListDealsInput,
                endpoint=self._endpoint('GET', '/objects/deals',
                                        query={'limit': 'limit', 'properties': 'properties'}),
            ),
        }
