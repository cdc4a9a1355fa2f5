"""
CRM MCP error taxonomy
Every error raised inside a tool call is converted into an error Envelope
before it reaches the transport; only startup errors propagate.
"""

from typing import Any, List, Optional


class CRMToolError(Exception):
    """Base class for all adapter errors"""


class ValidationError(CRMToolError):
    """Tool input failed its schema"""

    def __init__(self, tool_name: Optional[str], problems: List[str]):
        self.tool_name = tool_name
        self.problems = problems
        target = f"tool '{tool_name}'" if tool_name else "request"
        super().__init__(f"Invalid arguments for {target}: {'; '.join(problems)}")


class TransportError(CRMToolError):
    """Vendor API could not be reached"""

    def __init__(self, message: str):
        self.reason = message
        super().__init__(f"Error: {message}")


class VendorApiError(CRMToolError):
    """Vendor API answered with a non-2xx status"""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API Error ({status_code}): {body}")


class DecodeError(CRMToolError):
    """Vendor API answered 2xx but the body is not JSON"""

    def __init__(self, status_code: int, body: str, detail: Optional[Any] = None):
        self.status_code = status_code
        self.body = body
        snippet = body if len(body) <= 200 else body[:200] + "..."
        message = f"Error: Invalid JSON in response (status {status_code})"
        if detail:
            message += f": {detail}"
        super().__init__(f"{message}\n{snippet}")


class UnknownToolError(CRMToolError):
    """No tool registered under the requested name"""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Unknown tool: {tool_name}")


class DuplicateNameError(CRMToolError):
    """A tool with the same name is already registered"""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Tool already registered: {tool_name}")


class RegistrySealedError(CRMToolError):
    """Registration attempted after startup finished"""


class ConfigurationError(CRMToolError):
    """Required startup configuration is missing or invalid"""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        self.missing = missing or []
        super().__init__(message)
