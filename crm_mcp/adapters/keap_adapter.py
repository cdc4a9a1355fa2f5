"""
Keap API Adapter for MCP Server
Contacts and opportunities on the Keap (Infusionsoft) REST API v1
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..validation import ToolInput
from .base_adapter import BaseAdapter, ToolConfig
from .endpoint import EndpointDescriptor

KEAP_API_BASE = "https://api.infusionsoft.com/crm/rest/v1"

DEFAULT_CONTACT_FIELDS = ["email", "given_name", "family_name"]
DEFAULT_OPPORTUNITY_FIELDS = ["title", "stage", "contact", "estimated_close_date"]


# Keap payloads keep the API's own snake_case names

class PhoneNumber(BaseModel):
    type: str
    number: str


class Address(BaseModel):
    field_type: str
    line1: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class KeapContact(BaseModel):
    email: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    phone_numbers: Optional[List[PhoneNumber]] = None
    addresses: Optional[List[Address]] = None


class KeapInput(ToolInput):
    api_key: str = Field(..., description="Keap API key")


class ListContactsInput(KeapInput):
    limit: int = Field(10, description="Number of contacts to return")
    fields: List[str] = Field(default_factory=lambda: list(DEFAULT_CONTACT_FIELDS),
                              description="Contact fields to return")


class GetContactInput(KeapInput):
    contact_id: str = Field(..., description="Contact ID")
    fields: List[str] = Field(default_factory=lambda: list(DEFAULT_CONTACT_FIELDS),
                              description="Contact fields to return")


class CreateContactInput(KeapInput):
    contact: KeapContact = Field(..., description="Contact information")


class UpdateContactInput(KeapInput):
    contact_id: str = Field(..., description="Contact ID")
    contact: KeapContact = Field(..., description="Contact information to update")


class SearchContactsInput(ListContactsInput):
    query: str = Field(..., description="Search query")


class ListOpportunitiesInput(KeapInput):
    limit: int = Field(10, description="Number of opportunities to return")
    fields: List[str] = Field(default_factory=lambda: list(DEFAULT_OPPORTUNITY_FIELDS),
                              description="Opportunity fields to return")


def _search_param(values: Dict[str, Any]) -> Dict[str, Any]:
    """Keap filters contacts by exact field; emails go to email, anything else to given_name"""
    query = values['query']
    if '@' in query:
        return {'email': query}
    return {'given_name': query}


LISTING = {'limit': 'limit', 'fields': 'fields'}


class KeapAdapter(BaseAdapter):
    """Keap adapter; the API key is supplied on every call"""

    platform_name = "keap"
    display_name = "Keap API Tools"
    default_base_url = KEAP_API_BASE

    def _endpoint(self, method: str, path: str, **kwargs) -> EndpointDescriptor:
        kwargs.setdefault('comma_joined', frozenset({'fields'}))
        return EndpointDescriptor(method=method, base_url=self.base_url, path=path, **kwargs)

    def _setup_tools(self) -> Dict[str, ToolConfig]:
        return {
            'keap-list-contacts': ToolConfig(
                description="List Keap contacts",
                input_model=ListContactsInput,
                endpoint=self._endpoint('GET', '/contacts', query=LISTING),
            ),
            'keap-get-contact': ToolConfig(
                description="Get a Keap contact by ID",
                input_model=GetContactInput,
                endpoint=self._endpoint('GET', '/contacts/{contactId}', query={'fields': 'fields'}),
            ),
            'keap-create-contact': ToolConfig(
                description="Create a Keap contact",
                input_model=CreateContactInput,
                endpoint=self._endpoint('POST', '/contacts', body_from='contact',
                                        success_message="Contact created successfully with ID: {id}"),
            ),
            'keap-update-contact': ToolConfig(
                description="Update a Keap contact",
                input_model=UpdateContactInput,
                endpoint=self._endpoint('PATCH', '/contacts/{contactId}', body_from='contact',
                                        success_message="Contact {contactId} updated successfully"),
            ),
            'keap-search-contacts': ToolConfig(
                description="Search Keap contacts by email or first name",
                input_model=SearchContactsInput,
                endpoint=self._endpoint('GET', '/contacts', query=LISTING, shape_query=_search_param),
            ),
            'keap-list-opportunities': ToolConfig(
                description="List Keap opportunities",
                input_model=ListOpportunitiesInput,
                endpoint=self._endpoint('GET', '/opportunities', query=LISTING),
            ),
        }
