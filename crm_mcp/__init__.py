"""
CRM MCP Servers
Exposes helpdesk and CRM REST APIs (Freshdesk, GoHighLevel, HubSpot, Keap,
Pipedrive) as MCP tools with uniform request and response handling
"""

__version__ = "1.0.0"
