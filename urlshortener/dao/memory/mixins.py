"""In-memory store mixin providing shared state setup and consistency checks.

Responsibilities:
    - Initialize the record table, the shortcode index and their lock
    - Hold the injected clock, randomness and id collaborators
    - Healthcheck the consistency of the two indexes

Classes:
    - MemoryStoreMixin: Base mixin to inject in-memory storage & collaborators.

Example:
    Typical usage with a DAO implementation:

        >>> class ShortURLMemoryDAO(MemoryStoreMixin, ShortURLBaseDAO):
        ...     pass
        ...
        >>> dao = ShortURLMemoryDAO(settings=RegistrySettings(shortcode_length=8))
        >>> dao.healthcheck()
        True
"""

import uuid
import random
import logging
import threading
from datetime import datetime, UTC

from urlshortener.types import Clock, IdFactory
from urlshortener.dao.memory.helpers import StoredRecord
from urlshortener.utils.config import RegistrySettings


logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _uuid4() -> str:
    return str(uuid.uuid4())


class MemoryStoreMixin:
    """Mixin holding in-memory registry state for memory-backed DAOs.

    Attributes:
        settings (RegistrySettings):
            Registry tunables (default validity, shortcode length, ...).

        clock (Callable[[], datetime]):
            Returns the current time as an aware UTC datetime.

        rng (random.Random | None):
            Randomness for shortcode generation (None = system randomness).

        new_id (Callable[[], str]):
            Returns a fresh unique identifier for records and clicks.

    Internal state:
        _records (dict[str, StoredRecord]):
            Primary table, record id -> record.

        _shortcodes (dict[str, str]):
            Secondary index, shortcode -> record id. Its keys are the
            shortcode reservation set.

        _lock (threading.RLock):
            Guards both tables. Always acquired before any record lock.

    Methods:
        healthcheck() -> bool:
            Verify both tables describe the same set of records.
    """

    def __init__(
        self,
        settings: RegistrySettings | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        id_factory: IdFactory | None = None,
    ):
        """Initialize an empty in-memory store

        Args:
            settings (RegistrySettings | None):
                Registry settings. Defaults to RegistrySettings().

            clock (Callable[[], datetime] | None):
                Time source. Defaults to the system clock in UTC.

            rng (random.Random | None):
                Source of randomness for shortcodes. Defaults to SystemRandom.

            id_factory (Callable[[], str] | None):
                Identifier factory. Defaults to uuid4 strings.
        """
        self.settings = settings or RegistrySettings()
        self.clock = clock or _utcnow
        self.rng = rng
        self.new_id = id_factory or _uuid4

        self._records: dict[str, StoredRecord] = {}
        self._shortcodes: dict[str, str] = {}
        self._lock = threading.RLock()
        self._last_sweep = self.clock()

    def healthcheck(self) -> bool:
        """Check that the id table and the shortcode index agree

        Returns:
            bool: True if every record is indexed under its shortcode and every
                  index entry points at a stored record with that shortcode.
        """
        with self._lock:
            if len(self._records) != len(self._shortcodes):
                logger.error(
                    'Registry indexes differ in size.',
                    extra={'records': len(self._records), 'shortcodes': len(self._shortcodes)},
                )
                return False
            for shortcode, record_id in self._shortcodes.items():
                record = self._records.get(record_id)
                if record is None or record.shortcode != shortcode:
                    logger.error('Shortcode index points at a missing record.', extra={'shortcode': shortcode})
                    return False
            return True
