"""Favorite movie dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class FavoriteMovie:
    movie_id: int
    title: str
    poster_path: str | None
    release_date: str | None
    vote_average: float
    added_at: datetime

    @property
    def rating_text(self) -> str:
        return f"{self.vote_average:.1f}"
