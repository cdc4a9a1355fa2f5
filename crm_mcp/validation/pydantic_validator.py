"""
Pydantic Validation Layer for MCP Tools
Validates raw tool arguments against each tool's input model
"""

import logging
from typing import Any, Dict, List, Type

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from ..errors import ValidationError

logger = logging.getLogger(__name__)


class ToolInput(BaseModel):
    """
    Base class for tool input models

    Attributes are snake_case in Python and camelCase on the wire
    (``ticket_id`` <-> ``ticketId``). Unknown arguments are ignored.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def format_validation_errors(exc: PydanticValidationError) -> List[str]:
    """Turn pydantic errors into 'field: reason' strings"""
    problems = []
    for error in exc.errors(include_url=False):
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        problems.append(f"{location}: {message}" if location else message)
    return problems


def validate_tool_parameters(
    tool_name: str,
    input_model: Type[BaseModel],
    input_data: Any,
) -> Dict[str, Any]:
    """
    Validate raw tool arguments

    Args:
        tool_name: Tool being invoked (for error messages)
        input_model: Pydantic model describing the tool input
        input_data: Raw arguments as received from the client

    Returns:
        Validated arguments keyed by wire name, with absent optional fields removed

    Raises:
        ValidationError: If the arguments do not satisfy the model
    """
    if input_data is None:
        input_data = {}
    if not isinstance(input_data, dict):
        raise ValidationError(tool_name, [f"arguments must be a JSON object, got {type(input_data).__name__}"])

    try:
        validated_model = input_model.model_validate(input_data)
    except PydanticValidationError as e:
        problems = format_validation_errors(e)
        logger.warning(f"⚠️ Validation failed for {tool_name}: {'; '.join(problems)}")
        raise ValidationError(tool_name, problems) from e

    logger.debug(f"✅ Validation successful for {tool_name}")
    return validated_model.model_dump(mode="json", by_alias=True, exclude_none=True)
