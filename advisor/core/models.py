from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, model_validator


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


class ChatTurn(BaseModel):
    role: str = Field("user", description="'user' or 'assistant'")
    content: str = ""

    @model_validator(mode="before")
    @classmethod
    def _coerce_fields(cls, values):
        if isinstance(values, dict):
            values = dict(values)
            values["role"] = _as_text(values.get("role")) or "user"
            values["content"] = _as_text(values.get("content"))
        return values


class CourseRecord(BaseModel):
    code: str = ""
    name: str = ""
    category: str = ""
    units: str = ""

    @model_validator(mode="before")
    @classmethod
    def _coerce_fields(cls, values):
        # units often arrive as numbers from the client
        if isinstance(values, dict):
            values = {
                key: _as_text(values.get(key))
                for key in ("code", "name", "category", "units")
            }
        return values


class ChatRequest(BaseModel):
    message: Optional[str] = Field(None, description="User's latest message")
    history: List[ChatTurn] = Field(
        default_factory=list,
        description="Previous turns, frontend-managed; only the last 10 are used",
    )
    checked: List[CourseRecord] = Field(
        default_factory=list,
        description="Courses the student marked as completed",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_malformed_sequences(cls, values):
        if not isinstance(values, dict):
            return {}
        values = dict(values)
        for key in ("history", "checked"):
            items = values.get(key)
            if not isinstance(items, list):
                values[key] = []
            else:
                values[key] = [item for item in items if isinstance(item, dict)]
        return values


class CategorizeRequest(BaseModel):
    code: str = ""
    name: str = ""

    @model_validator(mode="before")
    @classmethod
    def _coerce_fields(cls, values):
        # name only feeds the empty-input check; a bad code is still rejected
        if not isinstance(values, dict):
            return {}
        values = dict(values)
        if values.get("code") is None:
            values["code"] = ""
        values["name"] = _as_text(values.get("name"))
        return values


class CategoryResult(BaseModel):
    category: str
    source: str


class AdvisorReply(BaseModel):
    reply: str
