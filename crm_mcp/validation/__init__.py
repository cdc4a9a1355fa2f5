"""
Tool input validation
"""

from .pydantic_validator import ToolInput, format_validation_errors, validate_tool_parameters

__all__ = [
    'ToolInput',
    'format_validation_errors',
    'validate_tool_parameters'
]
