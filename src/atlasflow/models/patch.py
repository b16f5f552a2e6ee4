"""Partial-update payloads for columns and cards.

A patch only carries the fields that were explicitly passed when it was
built; everything else keeps its previous value on the target. Passing
``None`` explicitly is how an optional field is cleared (card description).
Required fields cannot be cleared, and immutable fields (``id``,
``created_at``, a column's ``cards``) are not part of any patch.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from ..utils import dedupe_tags
from .column import ColumnTheme


def _reject_none(value: Any, info: ValidationInfo) -> Any:
    if value is None:
        raise ValueError(f"{info.field_name} cannot be cleared")
    return value


class _Patch(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    def changes(self) -> dict[str, Any]:
        """Fields explicitly set on this patch, ready for ``model_copy``."""
        return {name: getattr(self, name) for name in self.model_fields_set}

    def is_empty(self) -> bool:
        """True if the patch would not change anything."""
        return not self.model_fields_set


class ColumnPatch(_Patch):
    """Partial update for a column."""

    title: str | None = None
    theme: ColumnTheme | None = None

    @field_validator("title", "theme")
    @classmethod
    def validate_required(cls, v: Any, info: ValidationInfo) -> Any:
        return _reject_none(v, info)


class CardPatch(_Patch):
    """Partial update for a card."""

    title: str | None = None
    description: str | None = None
    tags: tuple[str, ...] | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None, info: ValidationInfo) -> str | None:
        return _reject_none(v, info)

    @field_validator("tags")
    @classmethod
    def validate_tags(
        cls, v: tuple[str, ...] | None, info: ValidationInfo
    ) -> tuple[str, ...]:
        """Tags may be replaced but not cleared to None; duplicates are dropped."""
        return dedupe_tags(_reject_none(v, info))
