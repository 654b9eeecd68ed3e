"""Movie records decoded from TMDB responses.

Field names follow the TMDB wire format (snake_case). `from_dict` and
`to_dict` are the only places that know the wire layout; display defaults
for missing values live on the records themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .. import config

_REVIEW_DATE_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
)


def _opt_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _opt_float(value: Any) -> float | None:
    return None if value is None else float(value)


def _opt_int(value: Any) -> int | None:
    return None if value is None else int(value)


def _opt_bool(value: Any) -> bool | None:
    return None if value is None else bool(value)


def _image_url(path: str | None) -> str | None:
    if not path:
        return None
    return f"{config.TMDB_IMAGE_BASE_URL}{path}"


def _rating_text(vote_average: float | None) -> str:
    if vote_average is None:
        return "N/A"
    return f"{vote_average:.1f}"


def _release_text(release_date: str | None) -> str:
    if not release_date:
        return "TBA"
    try:
        parsed = datetime.strptime(release_date, "%Y-%m-%d")
    except ValueError:
        return release_date
    return parsed.strftime("%b %d, %Y")


def _require_dict(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"{what} must be an object, got {type(data).__name__}")
    return data


def _require_list(data: Any, what: str) -> list[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise TypeError(f"{what} must be a list, got {type(data).__name__}")
    return data


@dataclass
class MovieSummary:
    id: int
    title: str
    overview: str = ""
    poster_path: str | None = None
    backdrop_path: str | None = None
    vote_average: float | None = None
    release_date: str | None = None
    adult: bool | None = None
    genre_ids: list[int] | None = None
    original_title: str | None = None
    original_language: str | None = None
    popularity: float | None = None
    video: bool | None = None
    vote_count: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "MovieSummary":
        data = _require_dict(data, "movie")
        genre_ids = data.get("genre_ids")
        return cls(
            id=int(data["id"]),
            title=str(data["title"]),
            overview=str(data.get("overview") or ""),
            poster_path=_opt_str(data.get("poster_path")),
            backdrop_path=_opt_str(data.get("backdrop_path")),
            vote_average=_opt_float(data.get("vote_average")),
            release_date=_opt_str(data.get("release_date")),
            adult=_opt_bool(data.get("adult")),
            genre_ids=None
            if genre_ids is None
            else [int(g) for g in _require_list(genre_ids, "genre_ids")],
            original_title=_opt_str(data.get("original_title")),
            original_language=_opt_str(data.get("original_language")),
            popularity=_opt_float(data.get("popularity")),
            video=_opt_bool(data.get("video")),
            vote_count=_opt_int(data.get("vote_count")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "overview": self.overview,
            "poster_path": self.poster_path,
            "backdrop_path": self.backdrop_path,
            "vote_average": self.vote_average,
            "release_date": self.release_date,
            "adult": self.adult,
            "genre_ids": None if self.genre_ids is None else list(self.genre_ids),
            "original_title": self.original_title,
            "original_language": self.original_language,
            "popularity": self.popularity,
            "video": self.video,
            "vote_count": self.vote_count,
        }

    @property
    def rating_text(self) -> str:
        return _rating_text(self.vote_average)

    @property
    def release_text(self) -> str:
        return _release_text(self.release_date)

    @property
    def year(self) -> str:
        return (self.release_date or "").split("-")[0]

    @property
    def poster_url(self) -> str | None:
        return _image_url(self.poster_path)


@dataclass
class MovieListPage:
    """One page of a movie listing (discover, popular or search)."""

    page_number: int = 1
    total_pages: int = 1
    total_results: int = 0
    items: list[MovieSummary] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "MovieListPage":
        data = _require_dict(data, "movie list")
        if "results" not in data:
            raise KeyError("results")
        results = _require_list(data.get("results"), "results")
        page = data.get("page")
        total_pages = data.get("total_pages")
        total_results = data.get("total_results")
        return cls(
            page_number=1 if page is None else int(page),
            total_pages=1 if total_pages is None else int(total_pages),
            total_results=0 if total_results is None else int(total_results),
            items=[MovieSummary.from_dict(entry) for entry in results],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "page": self.page_number,
            "results": [item.to_dict() for item in self.items],
            "total_pages": self.total_pages,
            "total_results": self.total_results,
        }

    @property
    def has_more(self) -> bool:
        return self.page_number < self.total_pages


@dataclass
class Genre:
    id: int
    name: str

    @classmethod
    def from_dict(cls, data: Any) -> "Genre":
        data = _require_dict(data, "genre")
        return cls(id=int(data["id"]), name=str(data["name"]))

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass
class MovieDetail:
    id: int
    title: str
    overview: str = ""
    poster_path: str | None = None
    backdrop_path: str | None = None
    vote_average: float | None = None
    release_date: str | None = None
    runtime: int | None = None
    genres: list[Genre] = field(default_factory=list)
    tagline: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "MovieDetail":
        data = _require_dict(data, "movie detail")
        return cls(
            id=int(data["id"]),
            title=str(data["title"]),
            overview=str(data.get("overview") or ""),
            poster_path=_opt_str(data.get("poster_path")),
            backdrop_path=_opt_str(data.get("backdrop_path")),
            vote_average=_opt_float(data.get("vote_average")),
            release_date=_opt_str(data.get("release_date")),
            runtime=_opt_int(data.get("runtime")),
            genres=[
                Genre.from_dict(g) for g in _require_list(data.get("genres"), "genres")
            ],
            tagline=_opt_str(data.get("tagline")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "overview": self.overview,
            "poster_path": self.poster_path,
            "backdrop_path": self.backdrop_path,
            "vote_average": self.vote_average,
            "release_date": self.release_date,
            "runtime": self.runtime,
            "genres": [g.to_dict() for g in self.genres],
            "tagline": self.tagline,
        }

    @property
    def rating_text(self) -> str:
        return _rating_text(self.vote_average)

    @property
    def release_text(self) -> str:
        return _release_text(self.release_date)

    @property
    def runtime_text(self) -> str:
        if self.runtime is None:
            return "N/A"
        hours, minutes = divmod(self.runtime, 60)
        return f"{hours}h {minutes}m"

    @property
    def genre_text(self) -> str:
        return ", ".join(g.name for g in self.genres)

    @property
    def poster_url(self) -> str | None:
        return _image_url(self.poster_path)


@dataclass
class Review:
    id: str
    author: str
    content: str
    created_at: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "Review":
        data = _require_dict(data, "review")
        return cls(
            id=str(data["id"]),
            author=str(data["author"]),
            content=str(data["content"]),
            created_at=_opt_str(data.get("created_at")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "author": self.author,
            "content": self.content,
            "created_at": self.created_at,
        }

    @property
    def date_text(self) -> str:
        if not self.created_at:
            return "Without Date"
        for fmt in _REVIEW_DATE_FORMATS:
            try:
                parsed = datetime.strptime(self.created_at, fmt)
            except ValueError:
                continue
            return parsed.strftime("%b %d, %Y %H:%M")
        return self.created_at


@dataclass
class Video:
    id: str
    key: str
    name: str
    site: str
    type: str

    @classmethod
    def from_dict(cls, data: Any) -> "Video":
        data = _require_dict(data, "video")
        return cls(
            id=str(data["id"]),
            key=str(data["key"]),
            name=str(data["name"]),
            site=str(data["site"]),
            type=str(data["type"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "key": self.key,
            "name": self.name,
            "site": self.site,
            "type": self.type,
        }

    @property
    def youtube_url(self) -> str | None:
        if self.site != "YouTube":
            return None
        return f"https://www.youtube.com/watch?v={self.key}"


@dataclass
class MovieDetailBundle:
    """Detail, reviews and videos of one movie, cached as a single unit."""

    detail: MovieDetail
    reviews: list[Review] = field(default_factory=list)
    videos: list[Video] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "MovieDetailBundle":
        data = _require_dict(data, "detail bundle")
        return cls(
            detail=MovieDetail.from_dict(data["detail"]),
            reviews=[
                Review.from_dict(r) for r in _require_list(data.get("reviews"), "reviews")
            ],
            videos=[
                Video.from_dict(v) for v in _require_list(data.get("videos"), "videos")
            ],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "detail": self.detail.to_dict(),
            "reviews": [r.to_dict() for r in self.reviews],
            "videos": [v.to_dict() for v in self.videos],
        }

    @property
    def trailer(self) -> Video | None:
        for video in self.videos:
            if video.site == "YouTube" and video.type == "Trailer":
                return video
        return None


def results_of(data: Any, item_cls):
    """Decode the `results` array of a TMDB collection response."""
    data = _require_dict(data, "collection")
    results = _require_list(data.get("results"), "results")
    return [item_cls.from_dict(entry) for entry in results]
