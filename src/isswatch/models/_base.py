"""Base model for isswatch value types.

Every value model inherits from :class:`WatchBaseModel`, which is frozen
and ignores unknown keys so raw provider payloads can be validated
directly.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class WatchBaseModel(BaseModel):
    """Frozen base for isswatch value models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
