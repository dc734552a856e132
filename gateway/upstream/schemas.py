"""Shapes of the upstream payloads the gateway inspects.

Both models allow extra fields: the gateway validates only what it reads
and passes everything else through untouched.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class AnimeRecord(BaseModel):
    """A catalog entity. Placeholder records come back with an empty name."""

    model_config = ConfigDict(extra="allow")

    name: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.name.strip())


class SearchHit(BaseModel):
    """One candidate in an ordered search result."""

    model_config = ConfigDict(extra="allow")

    id: str | int
