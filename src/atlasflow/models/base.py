"""Shared pydantic configuration for snapshot models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SnapshotModel(BaseModel):
    """
    Base for immutable board values.

    Field names are snake_case in Python and camelCase in the serialized
    snapshot document (e.g. ``created_at`` <-> ``createdAt``).
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
