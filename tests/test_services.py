from dataclasses import replace
from datetime import timedelta

from tele_moviedb import config
from tele_moviedb.services import build_services


def test_build_services_uses_settings(tmp_path) -> None:
    settings = replace(
        config.settings,
        TMDB_API_KEY="abc",
        CACHE_DB_PATH=str(tmp_path / "nested" / "movies.sqlite3"),
        LIST_CACHE_TTL_S=30.0,
        DETAIL_CACHE_TTL_S=90.0,
    )

    services = build_services(settings)
    try:
        assert services.cache.available is True
        assert services.repository.client.api_key == "abc"
        assert services.repository.list_expiry == timedelta(seconds=30)
        assert services.repository.detail_expiry == timedelta(seconds=90)
        assert (tmp_path / "nested" / "movies.sqlite3").exists()
    finally:
        services.close()

    assert services.cache.available is False
