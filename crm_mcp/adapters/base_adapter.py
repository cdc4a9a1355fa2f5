"""
Base API Adapter - Common functionality for all vendor integrations
Owns the HTTP client, sends one request per tool call and normalizes the
outcome into an Envelope
"""

import functools
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Type

import httpx
from pydantic import BaseModel

from ..config import ServerConfig
from ..envelope import Envelope
from ..errors import CRMToolError, DecodeError, TransportError, VendorApiError
from ..registry import ToolDescriptor, ToolRegistry
from .endpoint import EndpointDescriptor, VendorRequest, build_request

logger = logging.getLogger(__name__)

EMPTY_BODY_RESULT = {"message": "Operation completed successfully"}


@dataclass(frozen=True)
class ToolConfig:
    """One tool of a vendor: description, input schema and endpoint"""
    description: str
    input_model: Type[BaseModel]
    endpoint: EndpointDescriptor


def format_json(data: Any) -> str:
    """Stable pretty-print used for every success envelope"""
    return json.dumps(data, indent=2, ensure_ascii=False)


def _error_body(response: httpx.Response) -> str:
    """Vendor error body as compact JSON when possible, raw text otherwise"""
    text = response.text
    if not text:
        return response.reason_phrase
    try:
        return json.dumps(json.loads(text), separators=(",", ":"), ensure_ascii=False)
    except ValueError:
        return text


def _find_identifier(data: Any, paths: Tuple[Tuple[str, ...], ...]) -> Optional[Any]:
    for path in paths:
        node = data
        for key in path:
            if not isinstance(node, dict) or key not in node:
                node = None
                break
            node = node[key]
        if node is not None:
            return node
    return None


def confirmation_line(endpoint: EndpointDescriptor, validated_input: Dict[str, Any], data: Any) -> Optional[str]:
    """Fill the endpoint's success message, or None if it cannot be filled"""
    if not endpoint.success_message:
        return None

    values = dict(validated_input)
    values.pop("id", None)
    identifier = _find_identifier(data, endpoint.identifier_paths)
    if identifier is not None:
        values["id"] = identifier

    try:
        return endpoint.success_message.format_map(values)
    except (KeyError, IndexError):
        logger.debug(f"No confirmation line for {endpoint.path}: response has no identifier")
        return None


class BaseAdapter(ABC):
    """
    Abstract base class for all vendor adapters
    Subclasses declare their tools in ``_setup_tools``; request building,
    sending and response normalization are shared
    """

    platform_name: str = ""
    display_name: str = ""
    default_base_url: str = ""
    credential_env: Optional[str] = None

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or ServerConfig(vendor=self.platform_name, credential_env=self.credential_env)
        self.base_url = (self.config.base_url or self.default_base_url).rstrip('/')
        self.timeout = self.config.timeout

        # HTTP client configuration
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True
        )

        self.all_tools: Dict[str, ToolConfig] = self._setup_tools()

        logger.info(f"🔌 Initialized {self.platform_name} adapter with {len(self.all_tools)} tools")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close HTTP client (only if this adapter created it)"""
        if self._owns_client:
            await self.client.aclose()

    @abstractmethod
    def _setup_tools(self) -> Dict[str, ToolConfig]:
        """Return the vendor's tools keyed by tool name, in registration order"""

    def get_prompts(self) -> Dict[str, Tuple[str, str]]:
        """Prompt name -> (description, text); vendors without prompts return {}"""
        return {}

    def build_registry(self) -> ToolRegistry:
        """Create the sealed Tool Registry for this adapter"""
        registry = ToolRegistry(self.display_name or self.platform_name)
        for name, tool in self.all_tools.items():
            registry.register(ToolDescriptor(
                name=name,
                description=tool.description,
                input_model=tool.input_model,
                handler=functools.partial(self.call_endpoint, tool.endpoint),
            ))
        registry.seal()
        return registry

    async def call_endpoint(self, endpoint: EndpointDescriptor, validated_input: Dict[str, Any]) -> Envelope:
        """Build, send and normalize one endpoint call"""
        request = build_request(endpoint, validated_input, credential=self.config.credential)
        return await self.execute(
            request,
            success_message=lambda data: confirmation_line(endpoint, validated_input, data),
        )

    async def execute(
        self,
        request: VendorRequest,
        success_message: Optional[Callable[[Any], Optional[str]]] = None,
    ) -> Envelope:
        """
        Send the request and normalize the outcome

        Args:
            request: Request produced by ``build_request``
            success_message: Optional callback producing a confirmation line
                from the parsed response

        Returns:
            Envelope: pretty JSON on success, error text otherwise
        """
        try:
            data = await self._send(request)
        except CRMToolError as e:
            return Envelope.error(str(e))

        text = format_json(data)
        prefix = success_message(data) if success_message else None
        if prefix:
            text = f"{prefix}\n\n{text}"
        return Envelope.success(text)

    async def _send(self, request: VendorRequest) -> Any:
        """Issue exactly one HTTP call; raise a typed error on failure"""
        logger.debug(f"🌐 {request.describe()} - {self.platform_name}")

        try:
            response = await self.client.request(
                method=request.method,
                url=request.url,
                headers=request.headers,
                json=request.json_body
            )
        except httpx.TimeoutException as e:
            error_msg = f"Request timeout after {self.timeout}s for {self.platform_name}"
            logger.error(f"⏰ {error_msg}: {e}")
            raise TransportError(error_msg) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"🔌 Network error for {self.platform_name}: {e}")
            raise TransportError(str(e) or e.__class__.__name__) from e

        if not response.is_success:
            body = _error_body(response)
            logger.warning(f"❌ API Error [{response.status_code}] {request.describe()}")
            raise VendorApiError(response.status_code, body)

        if not response.content:
            return dict(EMPTY_BODY_RESULT)

        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"❌ Non-JSON success body from {request.describe()}")
            raise DecodeError(response.status_code, response.text, e) from e

    def get_platform_info(self) -> Dict[str, Any]:
        """Get adapter platform information"""
        return {
            'platform': self.platform_name,
            'name': self.display_name,
            'base_url': self.base_url,
            'credential': self.credential_env or 'per call (apiKey)',
            'tools': len(self.all_tools),
            'prompts': len(self.get_prompts())
        }
