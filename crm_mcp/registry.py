"""
Tool Registry
Ordered name -> tool mapping with validation and a no-throw invoke boundary
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from pydantic import BaseModel

from .envelope import Envelope
from .errors import DuplicateNameError, RegistrySealedError, UnknownToolError, ValidationError
from .validation import validate_tool_parameters

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Dict[str, Any]], Awaitable[Envelope]]


@dataclass(frozen=True)
class ToolDescriptor:
    """MCP tool definition bound to its handler"""
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: ToolHandler

    @property
    def input_schema(self) -> Dict[str, Any]:
        """JSON schema of the tool input, using wire (alias) names"""
        schema = self.input_model.model_json_schema(by_alias=True)
        schema.setdefault("type", "object")
        schema.setdefault("properties", {})
        return schema


class ToolRegistry:
    """
    Holds the tools of one server

    Populated at startup, then sealed. ``invoke`` never raises: every
    outcome is an Envelope.
    """

    def __init__(self, name: str):
        self.name = name
        self._tools: Dict[str, ToolDescriptor] = {}
        self._sealed = False

    def register(self, descriptor: ToolDescriptor) -> None:
        """Register a tool; names must be unique"""
        if self._sealed:
            raise RegistrySealedError(f"Registry {self.name} is sealed, cannot add {descriptor.name}")
        if descriptor.name in self._tools:
            raise DuplicateNameError(descriptor.name)
        self._tools[descriptor.name] = descriptor
        logger.debug(f"Registered tool: {descriptor.name}")

    def seal(self) -> None:
        self._sealed = True
        logger.info(f"🔒 {self.name}: {len(self._tools)} tools registered")

    @property
    def sealed(self) -> bool:
        return self._sealed

    def get(self, name: str) -> ToolDescriptor:
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def list_tools(self) -> List[ToolDescriptor]:
        return list(self._tools.values())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    async def invoke(self, name: str, raw_input: Optional[Dict[str, Any]] = None) -> Envelope:
        """
        Validate input and run a tool

        Args:
            name: Tool name
            raw_input: Arguments as received from the client

        Returns:
            Envelope: the handler's envelope, or an error envelope for an
            unknown tool, invalid input or a handler fault
        """
        try:
            descriptor = self.get(name)
        except UnknownToolError as e:
            logger.warning(f"❌ {e}")
            return Envelope.error(f"Error: {e}")

        try:
            validated = validate_tool_parameters(name, descriptor.input_model, raw_input)
        except ValidationError as e:
            return Envelope.error(str(e))

        try:
            return await descriptor.handler(validated)
        except ValidationError as e:
            return Envelope.error(str(e))
        except Exception as e:
            logger.error(f"💥 Tool {name} failed: {e}", exc_info=True)
            return Envelope.error(f"Error: {e}")
