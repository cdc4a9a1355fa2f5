"""
Endpoint descriptors and request construction
Turns validated tool input into a vendor HTTP request without doing any I/O
"""

import base64
import json
from dataclasses import dataclass, field
from enum import Enum
from string import Formatter
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Tuple
from urllib.parse import quote, urlencode

from pydantic import BaseModel, ConfigDict

from .. import __version__
from ..errors import ValidationError

USER_AGENT = f"crm-mcp-servers/{__version__}"

Shaper = Callable[[Dict[str, Any]], Dict[str, Any]]


class AuthStyle(str, Enum):
    """Where the credential goes on the outgoing request"""
    BEARER = "bearer"
    BASIC = "basic"
    QUERY = "query"


class EndpointDescriptor(BaseModel):
    """Static description of one vendor REST call"""
    model_config = ConfigDict(frozen=True)

    method: str = "GET"
    base_url: str
    path: str = ""

    # input field -> query key
    query: Dict[str, str] = {}
    comma_joined: FrozenSet[str] = frozenset()
    shape_query: Optional[Shaper] = None

    # input field -> body key
    body: Dict[str, str] = {}
    body_from: Optional[str] = None
    shape_body: Optional[Shaper] = None

    auth: AuthStyle = AuthStyle.BEARER
    auth_param: str = "api_token"
    credential_field: Optional[str] = "apiKey"
    headers: Dict[str, str] = {}

    success_message: Optional[str] = None
    identifier_paths: Tuple[Tuple[str, ...], ...] = (("id",),)

    @property
    def has_body(self) -> bool:
        if self.method.upper() == "GET":
            return False
        return bool(self.body or self.body_from or self.shape_body)


@dataclass(frozen=True)
class VendorRequest:
    """Fully built HTTP request, ready to send"""
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    json_body: Optional[Any] = None

    def describe(self) -> str:
        """Request line safe for logs (query string dropped, it may hold a token)"""
        return f"{self.method} {self.url.split('?', 1)[0]}"


def encode_query_value(value: Any) -> str:
    """Convert a scalar input value to its query-string form"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _fill_template(template: str, values: Dict[str, Any], encode: bool = True) -> str:
    """Substitute {placeholders} with input values, percent-encoded unless filling a host"""
    filled = []
    for literal, name, _spec, _conv in Formatter().parse(template):
        filled.append(literal)
        if name is None:
            continue
        value = values.get(name)
        if value is None:
            raise ValidationError(None, [f"{name}: required to build the request URL"])
        text = encode_query_value(value)
        filled.append(quote(text, safe="") if encode else text)
    return "".join(filled)


def _query_pairs(endpoint: EndpointDescriptor, values: Dict[str, Any]) -> List[Tuple[str, str]]:
    pairs: List[Tuple[str, str]] = []

    def add(key: str, value: Any, joined: bool) -> None:
        if value is None or value == "" or (isinstance(value, (list, tuple)) and not value):
            return
        if isinstance(value, (list, tuple)):
            if joined:
                pairs.append((key, ",".join(encode_query_value(v) for v in value)))
            else:
                pairs.extend((key, encode_query_value(v)) for v in value)
            return
        pairs.append((key, encode_query_value(value)))

    for field_name, key in endpoint.query.items():
        add(key, values.get(field_name), field_name in endpoint.comma_joined)

    if endpoint.shape_query:
        for key, value in endpoint.shape_query(values).items():
            add(key, value, False)

    return pairs


def _json_body(endpoint: EndpointDescriptor, values: Dict[str, Any]) -> Optional[Any]:
    if not endpoint.has_body:
        return None

    if endpoint.body_from:
        source = values.get(endpoint.body_from)
        body: Dict[str, Any] = dict(source) if isinstance(source, dict) else {}
    else:
        body = {}

    for field_name, key in endpoint.body.items():
        if values.get(field_name) not in (None, ""):
            body[key] = values[field_name]

    # Explicit nulls and empty values are allowed from the override only
    if endpoint.shape_body:
        body.update(endpoint.shape_body(values))

    return body


def _auth_headers(style: AuthStyle, credential: str) -> Dict[str, str]:
    if style == AuthStyle.BEARER:
        return {"Authorization": f"Bearer {credential}"}
    if style == AuthStyle.BASIC:
        encoded = base64.b64encode(f"{credential}:X".encode()).decode()
        return {"Authorization": f"Basic {encoded}"}
    return {}


def build_request(
    endpoint: EndpointDescriptor,
    validated_input: Dict[str, Any],
    credential: Optional[str] = None,
) -> VendorRequest:
    """
    Build the HTTP request for one tool call

    Args:
        endpoint: Endpoint configuration
        validated_input: Tool input after schema validation (absent optionals removed)
        credential: Process-wide credential, used when the endpoint does not
            take it from the input

    Returns:
        VendorRequest: method, full URL with query string, headers and JSON body
    """
    if endpoint.credential_field:
        credential = validated_input.get(endpoint.credential_field)
    if not credential:
        raise ValidationError(None, ["credential: no API credential available"])

    # Host placeholders are validated by the input models; only path segments are encoded
    url = (_fill_template(endpoint.base_url.rstrip("/"), validated_input, encode=False)
           + _fill_template(endpoint.path, validated_input))

    params = _query_pairs(endpoint, validated_input)
    if endpoint.auth == AuthStyle.QUERY:
        params.append((endpoint.auth_param, credential))
    if params:
        url = f"{url}?{urlencode(params)}"

    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
    }
    headers.update(endpoint.headers)
    headers.update(_auth_headers(endpoint.auth, credential))

    return VendorRequest(
        method=endpoint.method.upper(),
        url=url,
        headers=headers,
        json_body=_json_body(endpoint, validated_input),
    )
