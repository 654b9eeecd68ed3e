"""JSON payloads stored in the response cache."""

from __future__ import annotations

import json

from .models.movie import MovieDetailBundle, MovieListPage


def encode_page(page: MovieListPage) -> bytes:
    return json.dumps(page.to_dict(), separators=(",", ":")).encode("utf-8")


def decode_page(payload: bytes) -> MovieListPage:
    return MovieListPage.from_dict(json.loads(payload.decode("utf-8")))


def encode_bundle(bundle: MovieDetailBundle) -> bytes:
    return json.dumps(bundle.to_dict(), separators=(",", ":")).encode("utf-8")


def decode_bundle(payload: bytes) -> MovieDetailBundle:
    return MovieDetailBundle.from_dict(json.loads(payload.decode("utf-8")))
