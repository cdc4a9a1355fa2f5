"""
Freshdesk API Adapter for MCP Server
Tickets, notes and contacts on Freshdesk API v2, plus Freshchat conversations
"""

import logging
import re
from typing import Any, Dict, List, Literal, Optional

from pydantic import EmailStr, Field, field_validator

from ..validation import ToolInput
from .base_adapter import BaseAdapter, ToolConfig
from .endpoint import AuthStyle, EndpointDescriptor

logger = logging.getLogger(__name__)

FRESHDESK_BASE_URL = "https://{subdomain}.freshdesk.com/api/v2"
FRESHCHAT_BASE_URL = "https://{domain}/v2"

_LABEL = r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
SUBDOMAIN_RE = re.compile(rf"^{_LABEL}$")
HOST_RE = re.compile(rf"^{_LABEL}(?:\.{_LABEL})*(?::\d{{1,5}})?$")


def _strip_scheme(value: str) -> str:
    return value.replace('https://', '').replace('http://', '').strip('/')


# =============================================================================
# INPUT MODELS
# =============================================================================

class FreshdeskInput(ToolInput):
    api_key: str = Field(..., description="FreshDesk API key")
    subdomain: str = Field(..., description="Your FreshDesk subdomain (example: your-company)")

    @field_validator('subdomain')
    @classmethod
    def _clean_subdomain(cls, v: str) -> str:
        v = _strip_scheme(v)
        if v.endswith(".freshdesk.com"):
            v = v[:-len(".freshdesk.com")]
        if not SUBDOMAIN_RE.match(v):
            raise ValueError("must be a Freshdesk subdomain such as your-company")
        return v


class ListTicketsInput(FreshdeskInput):
    page: int = Field(1, description="Page number for pagination")
    per_page: int = Field(30, description="Number of results per page")
    filter: Optional[str] = Field(None, description="Filter query (e.g. 'status:2' for open tickets)")


class GetTicketInput(FreshdeskInput):
    ticket_id: int = Field(..., description="Ticket ID to retrieve")


class CreateTicketInput(FreshdeskInput):
    subject: str = Field(..., description="Ticket subject")
    description: str = Field(..., description="Ticket description")
    email: EmailStr = Field(..., description="Requester email")
    priority: int = Field(2, ge=1, le=4, description="Priority: 1 (Low) to 4 (Urgent)")
    status: int = Field(2, ge=2, le=5, description="Status: 2 (Open), 3 (Pending), 4 (Resolved), 5 (Closed)")
    tags: Optional[List[str]] = Field(None, description="Tags for the ticket")


class UpdateTicketInput(FreshdeskInput):
    ticket_id: int = Field(..., description="Ticket ID to update")
    subject: Optional[str] = Field(None, description="Updated ticket subject")
    description: Optional[str] = Field(None, description="Updated ticket description")
    priority: Optional[int] = Field(None, ge=1, le=4, description="Priority: 1 (Low) to 4 (Urgent)")
    status: Optional[int] = Field(None, ge=2, le=5, description="Status: 2 (Open), 3 (Pending), 4 (Resolved), 5 (Closed)")
    tags: Optional[List[str]] = Field(None, description="Updated tags for the ticket")


class AddNoteInput(FreshdeskInput):
    ticket_id: int = Field(..., description="Ticket ID to add note to")
    body: str = Field(..., description="Content of the note")
    is_private: bool = Field(True, description="Whether this note is private (only visible to agents)")


class ListContactsInput(FreshdeskInput):
    page: int = Field(1, description="Page number for pagination")
    per_page: int = Field(30, description="Number of results per page")


class GetContactInput(FreshdeskInput):
    contact_id: int = Field(..., description="Contact ID to retrieve")


class CreateContactInput(FreshdeskInput):
    name: str = Field(..., description="Contact's name")
    email: EmailStr = Field(..., description="Contact's email")
    phone: Optional[str] = Field(None, description="Contact's phone number")
    mobile_phone: Optional[str] = Field(None, description="Contact's mobile phone")
    twitter_id: Optional[str] = Field(None, description="Contact's Twitter ID")
    company_name: Optional[str] = Field(None, description="Company name of the contact")
    description: Optional[str] = Field(None, description="Description about the contact")


class UpdateContactInput(FreshdeskInput):
    contact_id: int = Field(..., description="Contact ID to update")
    name: Optional[str] = Field(None, description="Contact's updated name")
    email: Optional[EmailStr] = Field(None, description="Contact's updated email")
    phone: Optional[str] = Field(None, description="Contact's updated phone number")
    mobile_phone: Optional[str] = Field(None, description="Contact's updated mobile phone")
    twitter_id: Optional[str] = Field(None, description="Contact's updated Twitter ID")
    description: Optional[str] = Field(None, description="Updated description about the contact")


class FreshchatInput(ToolInput):
    api_key: str = Field(..., description="FreshChat API key")
    domain: str = Field(..., description="Your FreshChat domain (e.g., api.freshchat.com)")

    @field_validator('domain')
    @classmethod
    def _clean_domain(cls, v: str) -> str:
        v = _strip_scheme(v)
        if not HOST_RE.match(v):
            raise ValueError("must be a host name or host:port such as api.freshchat.com")
        return v


class ListConversationsInput(FreshchatInput):
    assignee_id: Optional[str] = Field(None, description="Filter by assignee ID")
    status: Optional[Literal["new", "assigned", "resolved", "closed"]] = Field(
        None, description="Filter by conversation status")
    page: int = Field(1, description="Page number for pagination")
    items_per_page: int = Field(20, description="Number of results per page")


class GetConversationInput(FreshchatInput):
    conversation_id: str = Field(..., description="Conversation ID to retrieve")


class SendMessageInput(FreshchatInput):
    conversation_id: str = Field(..., description="Conversation ID to send message to")
    actor_type: Literal["agent", "system"] = Field("agent", description="Type of sender")
    actor_id: str = Field(..., description="ID of the agent or system sending the message")
    message: str = Field(..., description="Message content to send")
    message_type: Literal["normal", "private"] = Field("normal", description="Type of message")


# =============================================================================
# BODY OVERRIDES
# =============================================================================

def _contact_company(values: Dict[str, Any]) -> Dict[str, Any]:
    """Company given by name: explicit null id plus other_companies entry"""
    company_name = values.get('companyName')
    if not company_name:
        return {}
    return {'company_id': None, 'other_companies': [{'name': company_name}]}


def _chat_message(values: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'actor_type': values['actorType'],
        'actor_id': values['actorId'],
        'message_type': values['messageType'],
        'message': {'type': 'text', 'text': values['message']}
    }


CONTACT_FIELDS = {
    'name': 'name',
    'email': 'email',
    'phone': 'phone',
    'mobilePhone': 'mobile',
    'twitterId': 'twitter_id',
    'description': 'description',
}

TICKET_UPDATE_FIELDS = {
    'subject': 'subject',
    'description': 'description',
    'priority': 'priority',
    'status': 'status',
    'tags': 'tags',
}


class FreshdeskAdapter(BaseAdapter):
    """
    Freshdesk and Freshchat adapter
    Credentials and account (subdomain / domain) are supplied on every call
    """

    platform_name = "freshdesk"
    display_name = "FreshWorks API Client"
    default_base_url = FRESHDESK_BASE_URL

    def _freshdesk(self, method: str, path: str, **kwargs) -> EndpointDescriptor:
        # Freshdesk uses Basic Auth with the API key as user name
        return EndpointDescriptor(method=method, base_url=self.base_url, path=path,
                                  auth=AuthStyle.BASIC, **kwargs)

    def _freshchat(self, method: str, path: str, **kwargs) -> EndpointDescriptor:
        return EndpointDescriptor(method=method, base_url=FRESHCHAT_BASE_URL, path=path, **kwargs)

    def _setup_tools(self) -> Dict[str, ToolConfig]:
        """Configure Freshdesk and Freshchat tools"""

        ticket_tools = {
            'freshdesk-list-tickets': ToolConfig(
                description="List Freshdesk tickets, optionally filtered",
                input_model=ListTicketsInput,
                endpoint=self._freshdesk('GET', '/tickets', query={
                    'page': 'page', 'perPage': 'per_page', 'filter': 'filter'}),
            ),
            'freshdesk-get-ticket': ToolConfig(
                description="Retrieve a specific ticket by ID",
                input_model=GetTicketInput,
                endpoint=self._freshdesk('GET', '/tickets/{ticketId}'),
            ),
            'freshdesk-create-ticket': ToolConfig(
                description="Create a new support ticket",
                input_model=CreateTicketInput,
                endpoint=self._freshdesk(
                    'POST', '/tickets',
                    body={'subject': 'subject', 'description': 'description', 'email': 'email',
                          'priority': 'priority', 'status': 'status', 'tags': 'tags'},
                    success_message="Ticket created successfully with ID: {id}"),
            ),
            'freshdesk-update-ticket': ToolConfig(
                description="Update an existing ticket; only provided fields change",
                input_model=UpdateTicketInput,
                endpoint=self._freshdesk('PUT', '/tickets/{ticketId}', body=TICKET_UPDATE_FIELDS,
                                         success_message="Ticket {ticketId} updated successfully"),
            ),
            'freshdesk-add-note': ToolConfig(
                description="Add a note to a ticket",
                input_model=AddNoteInput,
                endpoint=self._freshdesk('POST', '/tickets/{ticketId}/notes',
                                         body={'body': 'body', 'isPrivate': 'private'},
                                         success_message="Note added successfully to ticket {ticketId}"),
            ),
        }

        contact_tools = {
            'freshdesk-list-contacts': ToolConfig(
                description="List Freshdesk contacts",
                input_model=ListContactsInput,
                endpoint=self._freshdesk('GET', '/contacts', query={'page': 'page', 'perPage': 'per_page'}),
            ),
            'freshdesk-get-contact': ToolConfig(
                description="Retrieve a specific contact by ID",
                input_model=GetContactInput,
                endpoint=self._freshdesk('GET', '/contacts/{contactId}'),
            ),
            'freshdesk-create-contact': ToolConfig(
                description="Create a new contact",
                input_model=CreateContactInput,
                endpoint=self._freshdesk('POST', '/contacts', body=CONTACT_FIELDS,
                                         shape_body=_contact_company,
                                         success_message="Contact created successfully with ID: {id}"),
            ),
            'freshdesk-update-contact': ToolConfig(
                description="Update an existing contact; only provided fields change",
                input_model=UpdateContactInput,
                endpoint=self._freshdesk('PUT', '/contacts/{contactId}', body=CONTACT_FIELDS,
                                         success_message="Contact {contactId} updated successfully"),
            ),
        }

        conversation_tools = {
            'freshchat-list-conversations': ToolConfig(
                description="List Freshchat conversations",
                input_model=ListConversationsInput,
                endpoint=self._freshchat('GET', '/conversations', query={
                    'page': 'page', 'itemsPerPage': 'items_per_page',
                    'assigneeId': 'assignee_id', 'status': 'status'}),
            ),
            'freshchat-get-conversation': ToolConfig(
                description="Retrieve a Freshchat conversation",
                input_model=GetConversationInput,
                endpoint=self._freshchat('GET', '/conversations/{conversationId}'),
            ),
            'freshchat-send-message': ToolConfig(
                description="Send a message to a Freshchat conversation",
                input_model=SendMessageInput,
                endpoint=self._freshchat('POST', '/conversations/{conversationId}/messages',
                                         shape_body=_chat_message,
                                         success_message="Message sent successfully to conversation {conversationId}"),
            ),
        }

        return {
            **ticket_tools,
            **contact_tools,
            **conversation_tools
        }
