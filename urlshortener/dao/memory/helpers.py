"""Internal record storage for the in-memory registry

Classes:
    StoredRecord:
        Mutable registry-side state of one short URL, guarded by its own lock.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime

from urlshortener.models import ClickEventModel, URLRecordModel, URLStatsModel


__all__ = ['StoredRecord']


@dataclass(eq=False)
class StoredRecord:
    """Registry-owned state of a short URL record

    Everything except `clicks` and `click_count` is fixed at creation. Those
    two are only touched through `append_click()` and read through
    `snapshot()`/`stats()`, all under `lock`, so no reader ever sees one
    updated without the other.
    """

    id: str
    original_url: str
    shortcode: str
    created_at: datetime
    expires_at: datetime
    clicks: list[ClickEventModel] = field(default_factory=list)
    click_count: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    def append_click(self, click: ClickEventModel) -> None:
        # Caller holds self.lock
        self.clicks.append(click)
        self.click_count += 1

    def snapshot(self) -> URLRecordModel:
        # Caller holds self.lock
        return URLRecordModel(
            id=self.id,
            original_url=self.original_url,
            shortcode=self.shortcode,
            created_at=self.created_at,
            expires_at=self.expires_at,
            click_count=self.click_count,
            clicks=tuple(self.clicks),
        )

    def stats(self) -> URLStatsModel:
        # Caller holds self.lock
        return URLStatsModel(
            shortcode=self.shortcode,
            original_url=self.original_url,
            created_at=self.created_at,
            expires_at=self.expires_at,
            click_count=self.click_count,
            clicks=tuple(click.with_defaults() for click in self.clicks),
        )
