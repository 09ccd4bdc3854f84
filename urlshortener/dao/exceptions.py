"""Exceptions raised by short URL Data Access Objects (DAO).

Every failure of a registry operation is signalled with a distinct exception
class, so callers map them to responses by type and never by message text.
Each class carries a stable `error_code` and, where relevant, the offending
field and the violated constraint.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ValidationError:
        Base class for rejected caller input (carries `field` and `constraint`).

    InvalidURLError:
        Raised when the original URL is missing or malformed.

    InvalidShortcodeError:
        Raised when a custom shortcode breaks the format or length rules.

    InvalidValidityError:
        Raised when the validity window is outside the allowed range.

    ShortcodeConflictError:
        Raised when a custom shortcode is already reserved.

    ShortURLNotFoundError:
        Raised when no record is stored under a shortcode (or id).

    ShortURLExpiredError:
        Raised when a record exists but its validity window has passed.

    GenerationExhaustedError:
        Raised when no free shortcode was found within the attempt budget.

Example:
    >>> from urlshortener.dao.exceptions import ShortURLNotFoundError
    >>> raise ShortURLNotFoundError('abc123')
    Traceback (most recent call last):
        ...
    urlshortener.dao.exceptions.ShortURLNotFoundError: Short URL with code 'abc123' not found.
"""

from urlshortener.exceptions import URLShortenerError


class DAOError(URLShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ValidationError(DAOError):
    """Base class for input that the registry refuses to store.

    Attributes:
        field (str): name of the rejected input field.
        constraint (str): human readable description of the violated rule.
    """

    error_code = 'dao:validation_error'
    field = ''

    def __init__(self, constraint: str, value: object = None):
        self.constraint = constraint
        self.value = value
        super().__init__(f'Invalid {self.field}: {constraint}')


class InvalidURLError(ValidationError):
    """Exception raised when the original URL is missing or malformed."""

    error_code = 'INVALID_URL'
    field = 'url'


class InvalidShortcodeError(ValidationError):
    """Exception raised when a custom shortcode fails format or length rules."""

    error_code = 'INVALID_SHORTCODE'
    field = 'shortcode'


class InvalidValidityError(ValidationError):
    """Exception raised when the validity window is out of range."""

    error_code = 'INVALID_VALIDITY'
    field = 'validity'


class ShortcodeConflictError(DAOError):
    """Exception raised when a custom shortcode is already reserved by a stored record."""

    error_code = 'SHORTCODE_CONFLICT'

    def __init__(self, shortcode: str):
        self.shortcode = shortcode
        super().__init__(f"Short URL with code '{shortcode}' already exists.")


class ShortURLNotFoundError(DAOError):
    """Exception raised when a short URL is not found in the data store."""

    error_code = 'SHORT_URL_NOT_FOUND'

    def __init__(self, shortcode: str, key: str = 'code'):
        self.shortcode = shortcode
        super().__init__(f"Short URL with {key} '{shortcode}' not found.")


class ShortURLExpiredError(DAOError):
    """Exception raised when a short URL exists but is past its expiry.

    Attributes:
        expires_at (datetime): the moment the record stopped being live.
    """

    error_code = 'SHORT_URL_EXPIRED'

    def __init__(self, shortcode: str, expires_at):
        self.shortcode = shortcode
        self.expires_at = expires_at
        super().__init__(f"Short URL with code '{shortcode}' expired at {expires_at.isoformat()}.")


class GenerationExhaustedError(DAOError):
    """Exception raised when shortcode generation gives up after too many collisions."""

    error_code = 'GENERATION_EXHAUSTED'

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f'Could not generate a free shortcode after {attempts} attempts.')
