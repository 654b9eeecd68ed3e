"""Paged listing shown in a chat, kept so inline buttons can page through it."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ListKind = Literal["discover", "popular", "search"]


@dataclass
class ListSession:
    updated_at: float
    kind: ListKind
    query: str | None
    page: int
    total_pages: int
