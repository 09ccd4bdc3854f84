from dataclasses import dataclass, replace
from datetime import datetime
from typing import TypedDict

from urlshortener.utils.constants import DEFAULT_REFERRER, DEFAULT_USER_AGENT, DEFAULT_LOCATION


class ClickMetadata(TypedDict, total=False):
    """Request context supplied by the caller when a short URL is followed."""

    referrer: str | None
    user_agent: str | None
    location: str | None


@dataclass(frozen=True)
class ClickEventModel:
    """Represent a single redirect through a short URL.

    Attributes:
        id (str):
            Unique identifier of the click.
        timestamp (datetime):
            Moment the click was recorded (UTC).
        referrer (str | None):
            Referring page, None when the request carried no referrer.
        user_agent (str | None):
            Client user agent, None when unknown.
        location (str | None):
            Resolved client location, None when unknown.

    Example:
        >>> from datetime import datetime, UTC
        >>> click = ClickEventModel(id='c1', timestamp=datetime.now(UTC))
        >>> click.with_defaults().referrer
        'Direct'
    """

    id: str
    timestamp: datetime
    referrer: str | None = None
    user_agent: str | None = None
    location: str | None = None

    def with_defaults(self) -> 'ClickEventModel':
        """Return a copy where absent metadata is replaced by sentinel values."""
        return replace(
            self,
            referrer=self.referrer or DEFAULT_REFERRER,
            user_agent=self.user_agent or DEFAULT_USER_AGENT,
            location=self.location or DEFAULT_LOCATION,
        )


@dataclass(frozen=True)
class URLRecordModel:
    """Represent a shortened URL record as seen by callers.

    Instances are read views: the registry builds a new one for every
    lookup, so holding on to a model never exposes registry state.

    Attributes:
        id (str):
            Opaque unique identifier, stable for the record's lifetime.
        original_url (str):
            The destination the shortcode redirects to.
        shortcode (str):
            Unique short identifier among stored records.
        created_at (datetime):
            Creation time (UTC).
        expires_at (datetime):
            Time after which the record is no longer live (UTC).
        click_count (int):
            Number of recorded clicks, always equal to len(clicks).
        clicks (tuple[ClickEventModel, ...]):
            Click events in recording order.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> now = datetime.now(UTC)
        >>> record = URLRecordModel(
        ...     id='5b0f...',
        ...     original_url='https://example.com/article/123',
        ...     shortcode='abc123',
        ...     created_at=now,
        ...     expires_at=now + timedelta(minutes=30),
        ... )
        >>> record.click_count
        0
    """

    id: str
    original_url: str
    shortcode: str
    created_at: datetime
    expires_at: datetime
    click_count: int = 0
    clicks: tuple[ClickEventModel, ...] = ()


# fmt: off
@dataclass(frozen=True)
class URLStatsModel:
    shortcode: str                          # Unique short identifier
    original_url: str                       # Redirect destination
    created_at: datetime                    # Creation time (UTC)
    expires_at: datetime                    # Expiry time (UTC)
    click_count: int                        # Total recorded clicks
    clicks: tuple[ClickEventModel, ...]     # Clicks with sentinel defaults applied
# fmt: on
