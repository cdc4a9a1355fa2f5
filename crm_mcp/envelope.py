"""
Uniform tool reply envelope
"""

from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field


class TextContent(BaseModel):
    """Single text block of a tool reply"""
    type: Literal["text"] = "text"
    text: str


class Envelope(BaseModel):
    """Standardized tool response: success or error, never both"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content: List[TextContent]
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def success(cls, text: str) -> "Envelope":
        return cls(content=[TextContent(text=text)], is_error=False)

    @classmethod
    def error(cls, text: str) -> "Envelope":
        return cls(content=[TextContent(text=text)], is_error=True)

    @property
    def text(self) -> str:
        """Concatenated text of all content blocks"""
        return "\n".join(block.text for block in self.content)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)
