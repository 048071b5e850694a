from __future__ import annotations

"""
Pydantic schemas for the print queue endpoints.

Query-string and form values arrive as strings; empty values mean "use the
default". Defaults that depend on configuration (the placeholder owner key)
are supplied through the validation context:

    ListQuery.model_validate(request.args.to_dict(), context={"settings": settings})
"""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator

from braille_printer.printing.braille import DEFAULT_LANG


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _default_key(v: Optional[str], info: ValidationInfo) -> str:
    if v:
        return v
    settings = (info.context or {}).get("settings")
    if settings is None:
        raise ValueError("key required")
    return settings.example_auth_key


class AddRequest(BaseModel):
    """Submission form for POST /printq/add."""

    input: str = Field(
        default="",
        description="Text to transliterate. A line break makes the record a 'paper' job.",
        examples=["hello", "line1\nline2"],
    )
    lang: str = Field(
        default=DEFAULT_LANG,
        description="Source language: 'ko' or 'en'. Empty or 'auto' falls back to 'ko'.",
        examples=["ko", "en"],
    )

    @field_validator("lang", mode="before")
    @classmethod
    def _lang_default(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        if v is None or str(v).strip().lower() == "auto":
            return DEFAULT_LANG
        return str(v).strip().lower()


class ListQuery(BaseModel):
    """Query string for GET /printq/list."""

    type: Literal["label", "paper", "all"] = Field(
        default="label",
        description="Category filter; 'all' returns both labels and papers.",
    )
    key: Optional[str] = Field(
        default=None,
        validate_default=True,
        description="Owner key; defaults to the placeholder key.",
    )

    @field_validator("type", mode="before")
    @classmethod
    def _type_default(cls, v: Any) -> Any:
        return _blank_to_none(v) or "label"

    @field_validator("key", mode="before")
    @classmethod
    def _key_blank(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("key")
    @classmethod
    def _key_default(cls, v: Optional[str], info: ValidationInfo) -> str:
        return _default_key(v, info)


class ItemQuery(BaseModel):
    """Query string for GET /printq/item."""

    qid: int = Field(description="Queue record identifier (decimal).")
    format: Literal["text", "svg", "png"] = Field(
        default="text",
        description="'text' returns origin/result JSON, 'svg' the stored drawing, 'png' a raster preview.",
    )
    key: Optional[str] = Field(
        default=None,
        validate_default=True,
        description="Owner key; defaults to the placeholder key.",
    )

    @field_validator("qid", mode="before")
    @classmethod
    def _qid_decimal(cls, v: Any) -> Any:
        if isinstance(v, str):
            s = v.strip()
            if not (s.isascii() and s.isdigit()):
                raise ValueError("qid must be a decimal integer")
            return int(s)
        return v

    @field_validator("format", mode="before")
    @classmethod
    def _format_default(cls, v: Any) -> Any:
        return _blank_to_none(v) or "text"

    @field_validator("key", mode="before")
    @classmethod
    def _key_blank(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("key")
    @classmethod
    def _key_default(cls, v: Optional[str], info: ValidationInfo) -> str:
        return _default_key(v, info)


class QueueEntry(BaseModel):
    """One element of the listing response."""

    qid: int
    type: str


class ItemText(BaseModel):
    """Text projection of a queue record."""

    origin: str
    result: str


def first_error_message(e: ValidationError) -> str:
    """Return a concise message for the first validation error."""
    try:
        err = e.errors()[0]
    except IndexError:
        return str(e)
    loc = ".".join(str(p) for p in err.get("loc", ()))
    msg = err.get("msg") or str(e)
    return f"{loc}: {msg}" if loc else msg


__all__ = ["AddRequest", "ItemQuery", "ItemText", "ListQuery", "QueueEntry", "first_error_message"]
