"""Runtime utilities

Functions:
    running_locally() -> bool:
        True if the function runs in local SAM (or APP_ENV=local), False otherwise.

Example:
    >>> import os
    >>> from urlshortener.utils.runtime import running_locally
    >>> os.environ['APP_ENV'] = 'local'
    >>> running_locally()
    True
"""

import os

from urlshortener.utils.constants import APP_ENV_ENV, AWS_SAM_LOCAL_ENV


def running_locally() -> bool:
    """Check if the lambda is running locally (sam local invoke, tests, dev shell)

    Returns:
        bool: True if running locally, False otherwise.
    """
    env = os.getenv(APP_ENV_ENV, '').lower()
    return env == 'local' or os.getenv(AWS_SAM_LOCAL_ENV) == 'true'
