"""Data Access Object (DAO) implementation keeping short URLs in process memory

This module provides the in-memory implementation of ShortURLBaseDAO: the
shortcode registry shared by every request handler of a process.

Responsibilities:
    - Validate and create records, generating unique shortcodes;
    - Resolve records by shortcode (or id), checking expiry on every access;
    - Record clicks atomically per record;
    - Sweep expired records and release their shortcodes for reuse.

Concurrency:
    The id table and the shortcode index are guarded by one re-entrant lock;
    each record's click list and counter by the record's own lock. Locks are
    always taken in that order. Lookups hold the index lock only while
    resolving the key, so clicks on different records never contend.

Classes:
    ShortURLMemoryDAO:
        DAO for storing and retrieving short URL records in memory.

Example:
    >>> from urlshortener.dao.memory import ShortURLMemoryDAO

    >>> dao = ShortURLMemoryDAO()
    >>> record = dao.insert('https://example.com/page', validity_minutes=30, shortcode='page1')
    >>> record.shortcode
    'page1'
    >>> dao.get('page1').original_url
    'https://example.com/page'
    >>> dao.hit('page1').referrer is None
    True
    >>> dao.stats('page1').clicks[0].referrer
    'Direct'
"""

import logging
from datetime import timedelta

from beartype import beartype

from urlshortener.models import ClickMetadata, ClickEventModel, URLRecordModel, URLStatsModel
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.memory.mixins import MemoryStoreMixin
from urlshortener.dao.memory.helpers import StoredRecord
from urlshortener.dao.exceptions import ShortcodeConflictError, ShortURLNotFoundError, ShortURLExpiredError
from urlshortener.utils.shortener import generate_unique_shortcode
from urlshortener.utils.validators import validate_url, validate_validity, validate_shortcode


logger = logging.getLogger(__name__)


class ShortURLMemoryDAO(MemoryStoreMixin, ShortURLBaseDAO):
    """In-memory Data Access Object (DAO) for short URL records

    Attributes (see MemoryStoreMixin):
        settings (RegistrySettings):
            Default validity, shortcode length, generation cap, sweep interval.
        clock (Callable[[], datetime]):
            Injected time source.
        rng (random.Random | None):
            Injected randomness for shortcode generation.

    Methods:
        insert(original_url, validity_minutes=None, shortcode=None) -> URLRecordModel
        get(shortcode) -> URLRecordModel
        get_by_id(record_id) -> URLRecordModel
        hit(shortcode, metadata=None) -> ClickEventModel
        stats(shortcode) -> URLStatsModel
        cleanup() -> int
        count() -> int
        reserved() -> frozenset[str]

    NOTE:
        - Expired records keep their shortcode reserved until cleanup() runs,
          for both generated and custom shortcodes.
        - Returned models are snapshots; mutating registry state afterwards
          does not change them.
    """

    @beartype
    def insert(
        self,
        original_url: str | None,
        validity_minutes: int | None = None,
        shortcode: str | None = None,
    ) -> URLRecordModel:
        """Create a short URL record

        Validation happens in order URL, validity, shortcode format, so the
        first violated rule decides the raised error. The conflict check,
        shortcode generation and both index insertions run under the index
        lock, making creation atomic with respect to concurrent inserts,
        lookups and sweeps.

        Args:
            original_url (str | None):
                Destination URL (absolute, http or https).
            validity_minutes (int | None):
                Validity window in minutes. None uses the configured default (30).
            shortcode (str | None):
                Custom shortcode. None generates a random one.

        Returns:
            URLRecordModel: the created record (click_count=0, no clicks).

        Raises:
            InvalidURLError, InvalidValidityError, InvalidShortcodeError:
                If the corresponding input is rejected.
            ShortcodeConflictError:
                If the custom shortcode is reserved by a stored record.
            GenerationExhaustedError:
                If no free shortcode was found within the attempt budget.

        Example:
            >>> dao.insert('https://example.com/a', 30).click_count
            0
        """
        validate_url(original_url)
        if validity_minutes is None:
            validity_minutes = self.settings.default_validity_minutes
        validate_validity(validity_minutes)
        if shortcode is not None:
            validate_shortcode(shortcode)

        with self._lock:
            self._sweep_if_due()

            if shortcode is not None:
                if shortcode in self._shortcodes:
                    logger.info(
                        'Custom shortcode already reserved.',
                        extra={'shortcode': shortcode, 'event': 'SHORTCODE_CONFLICT'},
                    )
                    raise ShortcodeConflictError(shortcode)
            else:
                shortcode = generate_unique_shortcode(
                    self._shortcodes.__contains__,
                    rng=self.rng,
                    length=self.settings.shortcode_length,
                    max_attempts=self.settings.max_generation_attempts,
                )

            created_at = self.clock()
            record = StoredRecord(
                id=self.new_id(),
                original_url=original_url,
                shortcode=shortcode,
                created_at=created_at,
                expires_at=created_at + timedelta(minutes=validity_minutes),
            )
            self._records[record.id] = record
            self._shortcodes[shortcode] = record.id

        logger.info(
            'Created short URL.',
            extra={'shortcode': shortcode, 'event': 'SHORT_URL_CREATED', 'expires_at': record.expires_at.isoformat()},
        )
        logger.debug('Short URL %s points to %s.', shortcode, original_url)
        with record.lock:
            return record.snapshot()

    @beartype
    def get(self, shortcode: str) -> URLRecordModel:
        """Retrieve a live record by shortcode

        Expiry is checked on every call; an expired record that has not been
        swept yet is reported as expired, never returned.

        Raises:
            ShortURLNotFoundError:
                If no record is stored under the shortcode.
            ShortURLExpiredError:
                If the record's validity window has passed.

        Example:
            >>> dao.get('abc123')
            URLRecordModel(id='...', original_url='https://example.com', shortcode='abc123', ...)
        """
        record = self._lookup(shortcode)
        with record.lock:
            self._ensure_live(record)
            return record.snapshot()

    @beartype
    def get_by_id(self, record_id: str) -> URLRecordModel:
        """Retrieve a live record by its opaque id (same failures as get())"""
        with self._lock:
            record = self._records.get(record_id)
        if record is None:
            raise ShortURLNotFoundError(record_id, key='id')
        with record.lock:
            self._ensure_live(record)
            return record.snapshot()

    @beartype
    def hit(self, shortcode: str, metadata: ClickMetadata | None = None) -> ClickEventModel:
        """Record a click on a live record

        The expiry check, the append and the counter increment happen under
        the record's lock: concurrent clicks are serialized, never lost or
        duplicated, and click_count always equals the number of clicks.

        Args:
            shortcode (str):
                Shortcode that was followed.
            metadata (ClickMetadata | None):
                Optional `referrer`, `user_agent` and `location`. Absent or
                empty values are stored as None and defaulted in stats().

        Returns:
            ClickEventModel: the recorded click.

        Raises:
            ShortURLNotFoundError:
                If no record is stored under the shortcode.
            ShortURLExpiredError:
                If the record's validity window has passed.
        """
        metadata = metadata or {}
        record = self._lookup(shortcode)
        with record.lock:
            self._ensure_live(record)
            click = ClickEventModel(
                id=self.new_id(),
                timestamp=self.clock(),
                referrer=metadata.get('referrer') or None,
                user_agent=metadata.get('user_agent') or None,
                location=metadata.get('location') or None,
            )
            record.append_click(click)
            click_count = record.click_count

        logger.debug(
            'Recorded click on short URL.',
            extra={'shortcode': shortcode, 'event': 'SHORT_URL_HIT', 'click_count': click_count},
        )
        return click

    @beartype
    def stats(self, shortcode: str) -> URLStatsModel:
        """Return click statistics for a live record

        Clicks are listed in recording order, with missing referrer, user
        agent and location replaced by 'Direct', 'Unknown' and 'Unknown'.

        Raises:
            ShortURLNotFoundError, ShortURLExpiredError: as get().
        """
        record = self._lookup(shortcode)
        with record.lock:
            self._ensure_live(record)
            return record.stats()

    def cleanup(self) -> int:
        """Remove expired records and release their shortcodes

        Both indexes are updated under the index lock, so a concurrent lookup
        sees either the full record or no record at all.

        Returns:
            int: number of removed records.

        Example:
            >>> dao.cleanup()
            3
        """
        with self._lock:
            now = self.clock()
            expired = [record for record in self._records.values() if record.is_expired(now)]
            for record in expired:
                del self._records[record.id]
                if self._shortcodes.get(record.shortcode) == record.id:
                    del self._shortcodes[record.shortcode]
            self._last_sweep = now

        if expired:
            logger.info(
                'Swept expired short URLs.',
                extra={'event': 'SHORT_URLS_SWEPT', 'removed': len(expired)},
            )
        return len(expired)

    def count(self) -> int:
        """Return the number of stored records (live and expired-but-unswept)"""
        with self._lock:
            return len(self._records)

    def reserved(self) -> frozenset[str]:
        """Return a snapshot of the reserved shortcodes"""
        with self._lock:
            return frozenset(self._shortcodes)

    def _lookup(self, shortcode: str) -> StoredRecord:
        with self._lock:
            record_id = self._shortcodes.get(shortcode)
            record = self._records.get(record_id) if record_id is not None else None
        if record is None:
            raise ShortURLNotFoundError(shortcode)
        return record

    def _ensure_live(self, record: StoredRecord) -> None:
        if record.is_expired(self.clock()):
            logger.info(
                'Short URL accessed after expiry.',
                extra={'shortcode': record.shortcode, 'event': 'SHORT_URL_EXPIRED'},
            )
            raise ShortURLExpiredError(record.shortcode, record.expires_at)

    def _sweep_if_due(self) -> None:
        # Caller holds self._lock
        interval = self.settings.sweep_interval
        if interval is not None and self.clock() - self._last_sweep >= interval:
            self.cleanup()
