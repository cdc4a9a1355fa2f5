"""
GoHighLevel API Adapter for MCP Server
Contacts, tasks, opportunities, pipelines and calendars on the v1 REST API
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import EmailStr, Field, model_validator

from ..validation import ToolInput
from .base_adapter import BaseAdapter, ToolConfig
from .endpoint import EndpointDescriptor

logger = logging.getLogger(__name__)

GHL_API_BASE = "https://rest.gohighlevel.com/v1"


class GHLInput(ToolInput):
    api_key: str = Field(..., description="GoHighLevel API Key")


# Payload models: camelCase on the wire, sent to the API as given

class ContactData(ToolInput):
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    name: Optional[str] = None
    company_name: Optional[str] = None
    address1: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postal_code: Optional[str] = None
    source: Optional[str] = None
    tags: Optional[List[str]] = None
    custom_field: Optional[Dict[str, Any]] = None


class NewContactData(ContactData):

    @model_validator(mode='after')
    def _email_or_phone(self):
        if not self.email and not self.phone:
            raise ValueError("Either email or phone must be provided")
        return self


class NewTaskData(ToolInput):
    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    due_date: str = Field(..., description="Due date in ISO format")
    completed: bool = Field(False, description="Task completion status")
    assigned_to: Optional[str] = Field(None, description="User ID to assign task to")
    contact_id: Optional[str] = Field(None, description="Associated contact ID")


class TaskData(ToolInput):
    title: Optional[str] = Field(None, description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    due_date: Optional[str] = Field(None, description="Due date in ISO format")
    completed: Optional[bool] = Field(None, description="Task completion status")
    assigned_to: Optional[str] = Field(None, description="User ID to assign task to")


class NewOpportunityData(ToolInput):
    name: str = Field(..., description="Opportunity name")
    pipeline_id: str = Field(..., description="Pipeline ID")
    stage_id: str = Field(..., description="Stage ID")
    contact_id: Optional[str] = Field(None, description="Associated contact ID")
    monetary_value: Optional[float] = Field(None, description="Monetary value")
    assigned_to: Optional[str] = Field(None, description="User ID to assign to")


class NewEventData(ToolInput):
    title: str = Field(..., description="Event title")
    description: Optional[str] = Field(None, description="Event description")
    start_time: str = Field(..., description="Start time in ISO format")
    end_time: str = Field(..., description="End time in ISO format")
    calendar_id: str = Field(..., description="Calendar ID")
    contacts: Optional[List[str]] = Field(None, description="Contact IDs to associate")
    all_day: bool = Field(False, description="All-day event flag")


# Tool inputs

class GetContactsInput(GHLInput):
    query: Optional[str] = Field(None, description="Search query")
    page: int = Field(1, description="Page number")
    limit: int = Field(20, description="Number of results per page")


class ContactIdInput(GHLInput):
    contact_id: str = Field(..., description="Contact ID")


class CreateContactInput(GHLInput):
    contact_data: NewContactData


class UpdateContactInput(ContactIdInput):
    contact_data: ContactData


class ContactTagsInput(ContactIdInput):
    tags: List[str] = Field(..., description="Tags to add or remove")


class GetTasksInput(GHLInput):
    page: int = Field(1, description="Page number")
    limit: int = Field(20, description="Number of results per page")


class CreateTaskInput(GHLInput):
    task_data: NewTaskData


class TaskIdInput(GHLInput):
    task_id: str = Field(..., description="Task ID")


class UpdateTaskInput(TaskIdInput):
    task_data: TaskData


class GetOpportunitiesInput(GHLInput):
    pipeline_id: Optional[str] = Field(None, description="Filter by pipeline ID")
    stage_id: Optional[str] = Field(None, description="Filter by stage ID")
    page: int = Field(1, description="Page number")
    limit: int = Field(20, description="Number of results per page")


class CreateOpportunityInput(GHLInput):
    opportunity_data: NewOpportunityData


class CreateCalendarEventInput(GHLInput):
    event_data: NewEventData


PAGING = {'page': 'page', 'limit': 'limit'}


class GoHighLevelAdapter(BaseAdapter):
    """GoHighLevel CRM adapter; the API key is supplied on every call"""

    platform_name = "gohighlevel"
    display_name = "GoHighLevel Tools"
    default_base_url = GHL_API_BASE

    def _endpoint(self, method: str, path: str, **kwargs) -> EndpointDescriptor:
        return EndpointDescriptor(method=method, base_url=self.base_url, path=path, **kwargs)

    def _setup_tools(self) -> Dict[str, ToolConfig]:
        """Configure GoHighLevel tools"""

        contact_tools = {
            'getContacts': ToolConfig(
                description="Search and list contacts",
                input_model=GetContactsInput,
                endpoint=self._endpoint('GET', '/contacts', query={'query': 'query', **PAGING}),
            ),
            'getContact': ToolConfig(
                description="Get a contact by ID",
                input_model=ContactIdInput,
                endpoint=self._endpoint('GET', '/contacts/{contactId}'),
            ),
            'createContact': ToolConfig(
                description="Create a contact (email or phone required)",
                input_model=CreateContactInput,
                endpoint=self._endpoint('POST', '/contacts', body_from='contactData',
                                        success_message="Contact created successfully with ID: {id}",
                                        identifier_paths=(('contact', 'id'), ('id',))),
            ),
            'updateContact': ToolConfig(
                description="Update a contact",
                input_model=UpdateContactInput,
                endpoint=self._endpoint('PUT', '/contacts/{contactId}', body_from='contactData',
                                        success_message="Contact {contactId} updated successfully"),
            ),
            'addContactTags': ToolConfig(
                description="Add tags to a contact",
                input_model=ContactTagsInput,
                endpoint=self._endpoint('POST', '/contacts/{contactId}/tags', body={'tags': 'tags'}),
            ),
            'removeContactTags': ToolConfig(
                description="Remove tags from a contact",
                input_model=ContactTagsInput,
                endpoint=self._endpoint('DELETE', '/contacts/{contactId}/tags', body={'tags': 'tags'}),
            ),
        }

        task_tools = {
            'getTasks': ToolConfig(
                description="List tasks",
                input_model=GetTasksInput,
                endpoint=self._endpoint('GET', '/tasks', query=PAGING),
            ),
            'createTask': ToolConfig(
                description="Create a task",
                input_model=CreateTaskInput,
                endpoint=self._endpoint('POST', '/tasks', body_from='taskData',
                                        success_message="Task created successfully with ID: {id}",
                                        identifier_paths=(('task', 'id'), ('id',))),
            ),
            'updateTask': ToolConfig(
                description="Update a task",
                input_model=UpdateTaskInput,
                endpoint=self._endpoint('PUT', '/tasks/{taskId}', body_from='taskData',
                                        success_message="Task {taskId} updated successfully"),
            ),
            'deleteTask': ToolConfig(
                description="Delete a task",
                input_model=TaskIdInput,
                endpoint=self._endpoint('DELETE', '/tasks/{taskId}',
                                        success_message="Task {taskId} deleted successfully"),
            ),
        }

        pipeline_tools = {
            'getOpportunities': ToolConfig(
                description="List opportunities, optionally by pipeline and stage",
                input_model=GetOpportunitiesInput,
                endpoint=self._endpoint('GET', '/opportunities', query={
                    'pipelineId': 'pipelineId', 'stageId': 'stageId', **PAGING}),
            ),
            'createOpportunity': ToolConfig(
                description="Create an opportunity",
                input_model=CreateOpportunityInput,
                endpoint=self._endpoint('POST', '/opportunities', body_from='opportunityData',
                                        success_message="Opportunity created successfully with ID: {id}",
                                        identifier_paths=(('opportunity', 'id'), ('id',))),
            ),
            'getPipelines': ToolConfig(
                description="List pipelines",
                input_model=GHLInput,
                endpoint=self._endpoint('GET', '/pipelines'),
            ),
        }

        calendar_tools = {
            'createCalendarEvent': ToolConfig(
                description="Create a calendar event",
                input_model=CreateCalendarEventInput,
                endpoint=self._endpoint('POST', '/calendars/events', body_from='eventData',
                                        success_message="Event created successfully with ID: {id}",
                                        identifier_paths=(('event', 'id'), ('id',))),
            ),
            'getCalendars': ToolConfig(
                description="List calendars",
                input_model=GHLInput,
                endpoint=self._endpoint('GET', '/calendars'),
            ),
        }

        return {
            **contact_tools,
            **task_tools,
            **pipeline_tools,
            **calendar_tools
        }
