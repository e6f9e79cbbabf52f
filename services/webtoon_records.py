"""Record types produced by a scrape run."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

STATUS_OK = "ok"
STATUS_NOT_SUPPORTED_YET = "not_supported_yet"


@dataclass(frozen=True)
class ContentFlags:
    is_new: bool = False
    is_adult: bool = False
    is_paused: bool = False
    is_updated: bool = False


@dataclass(frozen=True)
class SummaryRecord:
    url: str
    content_id: str
    title: str
    authors: List[str]
    thumbnail_path: str
    platform: str
    update_days: List[str]
    flags: ContentFlags = field(default_factory=ContentFlags)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class EpisodeRecord:
    name: str
    url: str
    thumbnail_path: str
    create_date: str
    is_free: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DetailRecord:
    url: str
    summary: str
    description: str
    main_genre: str
    sub_genres: List[str]
    episodes: List[EpisodeRecord]
    page_count: int = 1

    def with_more_episodes(self, episodes: List[EpisodeRecord]) -> "DetailRecord":
        if not episodes:
            return self
        return DetailRecord(
            url=self.url,
            summary=self.summary,
            description=self.description,
            main_genre=self.main_genre,
            sub_genres=self.sub_genres,
            episodes=[*self.episodes, *episodes],
            page_count=self.page_count,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MergedRecord:
    summary: SummaryRecord
    detail: DetailRecord

    @property
    def url(self) -> str:
        return self.summary.url

    @property
    def episodes(self) -> List[EpisodeRecord]:
        return self.detail.episodes

    def to_dict(self) -> Dict[str, Any]:
        merged = self.summary.to_dict()
        detail = self.detail.to_dict()
        detail.pop("url", None)
        merged.update(detail)
        return merged


@dataclass
class ScrapeResult:
    status: str
    platform: str
    update_day: str
    records: List[MergedRecord] = field(default_factory=list)
    diagnostics: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "platform": self.platform,
            "update_day": self.update_day,
            "count": len(self.records),
            "records": [record.to_dict() for record in self.records],
            "diagnostics": list(self.diagnostics),
        }
