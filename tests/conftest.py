"""Shared test fixtures and dummy classes."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from tele_moviedb.cache_store import CacheStore
from tele_moviedb.favorites import FavoritesStore
from tele_moviedb.models.movie import (
    Genre,
    MovieDetail,
    MovieListPage,
    MovieSummary,
    Review,
    Video,
)
from tele_moviedb.repository import MovieRepository
from tele_moviedb.services import SERVICES_KEY, Services

T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


def make_page(
    page_number: int = 1, titles: tuple[str, ...] = ("Movie 1",)
) -> MovieListPage:
    items = [
        MovieSummary(
            id=100 + idx,
            title=title,
            overview=f"Overview {idx}",
            poster_path=f"/poster{idx}.jpg",
            vote_average=7.5,
            release_date="2023-01-01",
        )
        for idx, title in enumerate(titles, start=1)
    ]
    return MovieListPage(
        page_number=page_number, total_pages=3, total_results=len(items), items=items
    )


def make_detail(movie_id: int = 550) -> MovieDetail:
    return MovieDetail(
        id=movie_id,
        title="Fight Club",
        overview="An insomniac office worker...",
        poster_path="/fc.jpg",
        vote_average=8.4,
        release_date="1999-10-15",
        runtime=139,
        genres=[Genre(id=18, name="Drama")],
        tagline="Mischief. Mayhem. Soap.",
    )


class FakeTmdbClient:
    """Stands in for TmdbClient; counts calls and can fail or sleep per method."""

    def __init__(self) -> None:
        self.calls: dict[str, int] = {}
        self.errors: dict[str, Exception] = {}
        self.delay_s = 0.0
        self.pages: dict[int, MovieListPage] = {}
        self.reviews = [
            Review(id="r1", author="critic", content="Great.", created_at=None)
        ]
        self.videos = [
            Video(
                id="v1", key="SUXWAEX2jlg", name="Trailer", site="YouTube", type="Trailer"
            )
        ]

    async def _call(self, name: str, result: Any) -> Any:
        self.calls[name] = self.calls.get(name, 0) + 1
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if name in self.errors:
            raise self.errors[name]
        return result

    async def discover_movies(self, page: int = 1) -> MovieListPage:
        return await self._call("discover", self.pages.get(page) or make_page(page))

    async def popular_movies(self, page: int = 1) -> MovieListPage:
        return await self._call("popular", make_page(page, ("Popular",)))

    async def search_movies(self, query: str, page: int = 1) -> MovieListPage:
        return await self._call("search", make_page(page, (f"Result {query}",)))

    async def movie_details(self, movie_id: int) -> MovieDetail:
        return await self._call("details", make_detail(movie_id))

    async def movie_reviews(self, movie_id: int) -> list[Review]:
        return await self._call("reviews", list(self.reviews))

    async def movie_videos(self, movie_id: int) -> list[Video]:
        return await self._call("videos", list(self.videos))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_store(tmp_path, clock):
    store = CacheStore(tmp_path / "cache.sqlite3", clock=clock)
    yield store
    store.close()


@pytest.fixture
def fake_client() -> FakeTmdbClient:
    return FakeTmdbClient()


@pytest.fixture
def repository(fake_client, cache_store, clock) -> MovieRepository:
    return MovieRepository(fake_client, cache_store, clock=clock)


@pytest.fixture
def favorites(tmp_path, clock):
    store = FavoritesStore(tmp_path / "cache.sqlite3", clock=clock)
    yield store
    store.close()


def count_rows(store: CacheStore, table: str) -> int:
    return store.conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]


class DummyChat:
    """Dummy Telegram chat for testing."""

    def __init__(self, chat_id: int) -> None:
        self.id = chat_id
        self.sent: list[str] = []

    async def send_message(self, text: str) -> None:
        self.sent.append(text)


class DummyUser:
    """Dummy Telegram user for testing."""

    def __init__(self, user_id: int, username: str | None = None) -> None:
        self.id = user_id
        self.username = username


class DummyMessage:
    """Dummy Telegram message for testing."""

    def __init__(self) -> None:
        self.replies: list[str] = []
        self.photos: list[tuple[str, str]] = []  # (photo_url, caption)
        self.reply_markup = None

    async def reply_text(self, text: str, reply_markup=None, **_: Any) -> None:
        self.replies.append(text)
        self.reply_markup = reply_markup

    async def reply_photo(
        self, photo: str, caption: str = "", reply_markup=None, **_: Any
    ) -> None:
        self.photos.append((photo, caption))
        self.reply_markup = reply_markup


class DummyCallbackQuery:
    """Dummy Telegram callback query for testing."""

    def __init__(self, message: DummyMessage, data: str = "") -> None:
        self.message = message
        self.data = data
        self.edited: list[str] = []
        self.reply_markup = None

    async def answer(self, text=None, **_: Any) -> None:
        pass

    async def edit_message_text(self, text: str, reply_markup=None, **_: Any) -> None:
        self.edited.append(text)
        self.reply_markup = reply_markup

    async def edit_message_reply_markup(self, reply_markup=None, **_: Any) -> None:
        self.reply_markup = reply_markup


class DummyUpdate:
    """Dummy Telegram update for testing."""

    def __init__(self, chat_id: int = 123, user_id: int = 123, data: str = "") -> None:
        self.effective_chat = DummyChat(chat_id)
        self.effective_user = DummyUser(user_id)
        self.message = DummyMessage()
        self.effective_message = self.message
        self.callback_query = DummyCallbackQuery(self.message, data)


class DummyApplication:
    """Dummy Telegram application for testing."""

    def __init__(self) -> None:
        self.bot_data: dict[str, object] = {}


class DummyContext:
    """Dummy Telegram context for testing."""

    def __init__(
        self, args: list[str] | None = None, services: Services | None = None
    ) -> None:
        self.args = args or []
        self.application = DummyApplication()
        if services is not None:
            self.application.bot_data[SERVICES_KEY] = services
