"""Abstract base class for short URL data access objects (DAOs).

This class establishes the contract of the shortcode registry, independent
of where records are kept.

Responsibilities:
    - Create records (validated URL, validity window, generated or custom shortcode).
    - Resolve live records by shortcode and report missing or expired ones.
    - Record clicks and project click statistics.
    - Sweep expired records and release their shortcodes.

Example:
    Typical usage with the in-memory implementation:

        >>> from urlshortener.dao.memory import ShortURLMemoryDAO

        >>> dao = ShortURLMemoryDAO()
        >>> record = dao.insert('https://example.com/blog/article-123', validity_minutes=30)

        >>> dao.get(record.shortcode).original_url
        'https://example.com/blog/article-123'

        >>> dao.hit(record.shortcode, {'referrer': 'https://ref.com'}).referrer
        'https://ref.com'

        >>> dao.stats(record.shortcode).click_count
        1
"""

from abc import ABC, abstractmethod

from urlshortener.models import ClickMetadata, ClickEventModel, URLRecordModel, URLStatsModel


class ShortURLBaseDAO(ABC):
    """Interface for short URL data access objects (DAOs).

    Methods:
        insert(original_url, validity_minutes=None, shortcode=None) -> URLRecordModel:
            Create a new record. Raises InvalidURLError, InvalidValidityError,
            InvalidShortcodeError, ShortcodeConflictError or GenerationExhaustedError.

        get(shortcode) -> URLRecordModel:
            Return the live record for a shortcode.
            Raises ShortURLNotFoundError or ShortURLExpiredError.

        hit(shortcode, metadata=None) -> ClickEventModel:
            Record a click on a live record.
            Raises ShortURLNotFoundError or ShortURLExpiredError.

        stats(shortcode) -> URLStatsModel:
            Return click statistics for a live record.
            Raises ShortURLNotFoundError or ShortURLExpiredError.

        cleanup() -> int:
            Remove expired records and release their shortcodes.
            Returns the number of removed records.

    Subclassing:
        Datastore-specific implementations must extend this class and
        implement all abstract methods.
    """

    @abstractmethod
    def insert(
        self,
        original_url: str | None,
        validity_minutes: int | None = None,
        shortcode: str | None = None,
    ) -> URLRecordModel:
        """Create a short URL record.

        Args:
            original_url (str | None):
                Destination URL (absolute, http or https).

            validity_minutes (int | None):
                Validity window in minutes, within [1, 10080]. None uses the
                configured default (30 minutes).

            shortcode (str | None):
                Custom shortcode (alphanumeric, 3 to 20 characters).
                A random one is generated when omitted.

        Returns:
            URLRecordModel: the created record, with no clicks.

        Raises:
            InvalidURLError:
                If the URL is missing or malformed.

            InvalidValidityError:
                If the validity window is out of range.

            InvalidShortcodeError:
                If the custom shortcode violates format rules.

            ShortcodeConflictError:
                If the custom shortcode is already reserved.

            GenerationExhaustedError:
                If no free shortcode could be generated.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str) -> URLRecordModel:
        """Retrieve a live record by shortcode.

        Raises:
            ShortURLNotFoundError:
                If no record is stored under the shortcode.

            ShortURLExpiredError:
                If the record's validity window has passed.
        """
        pass

    @abstractmethod
    def hit(self, shortcode: str, metadata: ClickMetadata | None = None) -> ClickEventModel:
        """Record a click on a live record.

        Args:
            shortcode (str):
                Shortcode that was followed.

            metadata (ClickMetadata | None):
                Optional referrer, user agent and location of the click.

        Returns:
            ClickEventModel: the recorded click (absent metadata left as None).

        Raises:
            ShortURLNotFoundError:
                If no record is stored under the shortcode.

            ShortURLExpiredError:
                If the record's validity window has passed.
        """
        pass

    @abstractmethod
    def stats(self, shortcode: str) -> URLStatsModel:
        """Return click statistics for a live record (same failures as get())."""
        pass

    @abstractmethod
    def cleanup(self) -> int:
        """Remove all expired records and return how many were removed."""
        pass
