import pytest

from tele_moviedb import config
from tele_moviedb.errors import HttpStatusError, InvalidResponse
from tele_moviedb.handlers import callbacks, movies
from tele_moviedb.handlers.common import get_state
from tele_moviedb.services import Services

from conftest import DummyContext, DummyUpdate


@pytest.fixture(autouse=True)
def allow_test_chat(monkeypatch) -> None:
    monkeypatch.setattr(config, "ALLOW_ALL_CHATS", False)
    monkeypatch.setattr(config, "ALLOWED", {123})


@pytest.fixture
def services(repository, favorites, cache_store) -> Services:
    return Services(repository=repository, favorites=favorites, cache=cache_store)


def _buttons(markup) -> list[str]:
    return [button.text for row in markup.inline_keyboard for button in row]


def _callbacks(markup) -> list[str]:
    return [button.callback_data for row in markup.inline_keyboard for button in row]


@pytest.mark.asyncio
async def test_discover_replies_with_listing_and_keyboard(services) -> None:
    update = DummyUpdate()
    context = DummyContext(services=services)

    await movies.cmd_discover(update, context)

    assert "Discover Movies" in update.message.replies[0]
    data = _callbacks(update.message.reply_markup)
    assert "mlinfo:101" in data
    assert any(d.startswith("mlpage:") and d.endswith(":2") for d in data)
    assert len(get_state(context.application).list_sessions) == 1


@pytest.mark.asyncio
async def test_discover_rejects_bad_page(services, fake_client) -> None:
    update = DummyUpdate()

    await movies.cmd_discover(update, DummyContext(args=["abc"], services=services))

    assert update.message.replies == ["Usage: /discover [page]"]
    assert fake_client.calls == {}


@pytest.mark.asyncio
async def test_listing_error_is_reported(services, fake_client) -> None:
    fake_client.errors["popular"] = InvalidResponse("timed out")
    update = DummyUpdate()

    await movies.cmd_popular(update, DummyContext(services=services))

    assert "Invalid response: timed out" in update.message.replies[0]
    assert "Try again later or refresh." in update.message.replies[0]


@pytest.mark.asyncio
async def test_search_requires_query(services) -> None:
    update = DummyUpdate()

    await movies.cmd_search(update, DummyContext(services=services))

    assert update.message.replies == ["Usage: /search <query>"]


@pytest.mark.asyncio
async def test_search_joins_args(services, fake_client) -> None:
    update = DummyUpdate()

    await movies.cmd_search(
        update, DummyContext(args=["fight", "club"], services=services)
    )

    assert "Search: fight club" in update.message.replies[0]
    assert fake_client.calls["search"] == 1


@pytest.mark.asyncio
async def test_movie_sends_poster_with_caption(services) -> None:
    update = DummyUpdate()

    await movies.cmd_movie(update, DummyContext(args=["550"], services=services))

    photo, caption = update.message.photos[0]
    assert photo.endswith("/fc.jpg")
    assert "Fight Club" in caption
    assert _buttons(update.message.reply_markup) == ["❤️ Add favorite"]


@pytest.mark.asyncio
async def test_movie_not_found(services, fake_client, cache_store) -> None:
    fake_client.errors["details"] = HttpStatusError(404)
    update = DummyUpdate()

    await movies.cmd_movie(update, DummyContext(args=["550"], services=services))

    assert "HTTP error: 404" in update.message.replies[0]
    assert await cache_store.get_detail(550) is None


@pytest.mark.asyncio
async def test_fav_toggles_and_lists(services) -> None:
    context = DummyContext(args=["550"], services=services)
    first = DummyUpdate()
    await movies.cmd_fav(first, context)
    assert "Added <b>Fight Club</b>" in first.message.replies[0]

    listing = DummyUpdate()
    await movies.cmd_favorites(listing, DummyContext(services=services))
    assert "Fight Club (1999)" in listing.message.replies[0]

    second = DummyUpdate()
    await movies.cmd_fav(second, context)
    assert "Removed <b>Fight Club</b>" in second.message.replies[0]


@pytest.mark.asyncio
async def test_unauthorized_chat_is_rejected(monkeypatch, services, fake_client):
    monkeypatch.setattr(config, "ALLOWED", {999})
    update = DummyUpdate(chat_id=123)

    await movies.cmd_discover(update, DummyContext(services=services))

    assert update.effective_chat.sent == ["⛔ Not authorized"]
    assert fake_client.calls == {}


@pytest.mark.asyncio
async def test_page_callback_edits_listing(services, fake_client) -> None:
    context = DummyContext(services=services)
    await movies.cmd_discover(DummyUpdate(), context)
    key = next(iter(get_state(context.application).list_sessions))

    update = DummyUpdate(data=f"mlpage:{key}:2")
    await callbacks.handle_callback_query(update, context)

    assert "page 2/3" in update.callback_query.edited[0]
    assert fake_client.calls["discover"] == 2
    assert get_state(context.application).list_sessions[key].page == 2


@pytest.mark.asyncio
async def test_page_callback_with_unknown_session(services) -> None:
    update = DummyUpdate(data="mlpage:missing:2")

    await callbacks.handle_callback_query(update, DummyContext(services=services))

    assert "Listing expired" in update.message.replies[0]


@pytest.mark.asyncio
async def test_info_and_favorite_toggle_callbacks(services) -> None:
    context = DummyContext(services=services)

    info = DummyUpdate(data="mlinfo:550")
    await callbacks.handle_callback_query(info, context)
    assert info.message.photos

    toggle = DummyUpdate(data="favtoggle:550")
    await callbacks.handle_callback_query(toggle, context)
    assert _buttons(toggle.callback_query.reply_markup) == ["💔 Remove favorite"]
    assert await services.favorites.is_favorite(550) is True


@pytest.mark.asyncio
async def test_callback_error_is_reported(services, fake_client) -> None:
    fake_client.errors["videos"] = HttpStatusError(401)
    update = DummyUpdate(data="mlinfo:550")

    await callbacks.handle_callback_query(update, DummyContext(services=services))

    assert "Check the API configuration." in update.message.replies[0]


@pytest.mark.asyncio
async def test_long_detail_falls_back_to_text(services, fake_client) -> None:
    fake_client.reviews = fake_client.reviews * 3
    for review in fake_client.reviews:
        review.content = "word " * 80
    update = DummyUpdate()

    await movies.cmd_movie(update, DummyContext(args=["550"], services=services))

    assert update.message.photos == []
    assert "Fight Club" in update.message.replies[0]
    assert _buttons(update.message.reply_markup) == ["❤️ Add favorite"]


@pytest.mark.asyncio
async def test_empty_allow_list_rejects_every_chat(
    monkeypatch, services, fake_client
) -> None:
    monkeypatch.setattr(config, "ALLOWED", set())
    update = DummyUpdate()

    await movies.cmd_discover(update, DummyContext(services=services))

    assert update.effective_chat.sent == ["⛔ Not authorized"]
    assert fake_client.calls == {}


@pytest.mark.asyncio
async def test_allow_all_chats_opens_the_bot(monkeypatch, services) -> None:
    monkeypatch.setattr(config, "ALLOWED", set())
    monkeypatch.setattr(config, "ALLOW_ALL_CHATS", True)
    update = DummyUpdate(chat_id=42)

    await movies.cmd_discover(update, DummyContext(services=services))

    assert update.effective_chat.sent == []
    assert "Discover Movies" in update.message.replies[0]
