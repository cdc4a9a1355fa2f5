"""
CRM MCP Servers - API Adapters Package
Contains adapters for Freshdesk/Freshchat, GoHighLevel, HubSpot, Keap and Pipedrive
"""

from .base_adapter import BaseAdapter, ToolConfig
from .endpoint import AuthStyle, EndpointDescriptor, VendorRequest, build_request
from .freshdesk_adapter import FreshdeskAdapter
from .gohighlevel_adapter import GoHighLevelAdapter
from .hubspot_adapter import HubspotAdapter
from .keap_adapter import KeapAdapter
from .pipedrive_adapter import PipedriveAdapter

ADAPTERS = {
    adapter.platform_name: adapter
    for adapter in (FreshdeskAdapter, GoHighLevelAdapter, HubspotAdapter, KeapAdapter, PipedriveAdapter)
}

__all__ = [
    'ADAPTERS',
    'AuthStyle',
    'BaseAdapter',
    'EndpointDescriptor',
    'FreshdeskAdapter',
    'GoHighLevelAdapter',
    'HubspotAdapter',
    'KeapAdapter',
    'PipedriveAdapter',
    'ToolConfig',
    'VendorRequest',
    'build_request'
]
