"""Pydantic request/response models for the HTTP API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from ..channels.types import MessageType


class MessagePayload(BaseModel):
    """Tagged message: text content is a string, other types a field dict."""

    type: MessageType = Field(..., description="text | image | voice | video | file | textcard | news | markdown")
    content: str | dict[str, Any] = Field(..., description="Content matching the type")


class SendMessageRequest(BaseModel):
    """Send message request body."""

    to_user_ids: list[str] = Field(default_factory=list, description="Recipient user IDs")
    to_dept_ids: list[str] = Field(default_factory=list, description="Recipient department IDs")
    message: MessagePayload


class DepartmentOut(BaseModel):
    id: int
    name: str


class UserOut(BaseModel):
    id: str
    name: str
    phone: str = ""
    dept_ids: list[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """IMError.to_dict() 的结构"""

    error: str
    provider: str = ""
    message: str
    code: int | None = None
    details: dict[str, Any] | None = None
