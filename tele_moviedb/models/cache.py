"""Rows of the durable response cache."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class CachedPage:
    page_number: int
    payload: bytes
    saved_at: datetime


@dataclass
class CachedDetailBundle:
    movie_id: int
    payload: bytes
    saved_at: datetime
