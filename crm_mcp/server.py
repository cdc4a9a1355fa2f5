"""
FastMCP binding
Publishes a Tool Registry (and vendor prompts) on a FastMCP server
"""

import logging
from typing import Any, Dict, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.prompts import Prompt
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent
from pydantic import PrivateAttr

from .adapters import BaseAdapter
from .registry import ToolDescriptor, ToolRegistry

logger = logging.getLogger(__name__)


class RegistryTool(Tool):
    """FastMCP tool that forwards calls to a Tool Registry"""

    _registry: Optional[ToolRegistry] = PrivateAttr(default=None)

    @classmethod
    def from_descriptor(cls, registry: ToolRegistry, descriptor: ToolDescriptor) -> "RegistryTool":
        tool = cls(
            name=descriptor.name,
            description=descriptor.description,
            parameters=descriptor.input_schema,
        )
        tool._registry = registry
        return tool

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        envelope = await self._registry.invoke(self.name, arguments)
        if envelope.is_error:
            # FastMCP reports ToolError as a result with isError set
            raise ToolError(envelope.text)
        return ToolResult(content=[TextContent(type="text", text=block.text) for block in envelope.content])


def _prompt_function(text: str):
    def render() -> str:
        return text
    return render


def create_server(adapter: BaseAdapter, registry: Optional[ToolRegistry] = None) -> FastMCP:
    """
    Create the FastMCP server for one vendor adapter

    Args:
        adapter: Vendor adapter providing tools and prompts
        registry: Pre-built registry (defaults to ``adapter.build_registry()``)
    """
    if registry is None:
        registry = adapter.build_registry()
    mcp = FastMCP(name=registry.name)

    for descriptor in registry.list_tools():
        mcp.add_tool(RegistryTool.from_descriptor(registry, descriptor))

    for name, (description, text) in adapter.get_prompts().items():
        mcp.add_prompt(Prompt.from_function(_prompt_function(text), name=name, description=description))

    logger.info(f"🛠️  {registry.name}: {len(registry)} tools, {len(adapter.get_prompts())} prompts")
    return mcp
