"""API Gateway (Lambda proxy) response builders shared by all handlers

Error bodies follow one shape:

    {"message": "<Reason phrase> (<detail>)", "errorCode": "<ERROR_CODE>"}

so clients can branch on `errorCode` and show `message` to humans.
"""

import json
from typing import Any

from urlshortener.dao.exceptions import (
    DAOError,
    ValidationError,
    ShortcodeConflictError,
    ShortURLNotFoundError,
    ShortURLExpiredError,
    GenerationExhaustedError,
)


JSON_HEADERS = {'Content-Type': 'application/json'}

# Registry error -> (status code, reason phrase)
ERROR_STATUS: dict[type[DAOError], tuple[int, str]] = {
    ValidationError: (400, 'Bad Request'),
    ShortcodeConflictError: (409, 'Conflict'),
    ShortURLNotFoundError: (404, 'Not Found'),
    ShortURLExpiredError: (410, 'Gone'),
    GenerationExhaustedError: (503, 'Service Unavailable'),
}


def response_json(status_code: int, body: dict[str, Any], headers: dict[str, str] | None = None) -> dict:
    return {
        'statusCode': status_code,
        'headers': {**JSON_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def response_error(
    status_code: int,
    reason: str,
    message: str | None = None,
    error_code: str | None = None,
    headers: dict[str, str] | None = None,
) -> dict:
    body = {'message': reason if not message else f'{reason} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return response_json(status_code, body, headers)


def response_400(message: str | None = None, error_code: str | None = None) -> dict:
    return response_error(400, 'Bad Request', message, error_code)


def response_500(message: str | None = None) -> dict:
    return response_error(500, 'Internal Server Error', message)


def response_405(message: str | None = None, error_code: str | None = None, *, allow: str) -> dict:
    return response_error(405, 'Method Not Allowed', message, error_code, headers={'Allow': allow})


def response_302(*, location: str) -> dict:
    return {
        'statusCode': 302,
        'headers': {'Location': location},
        'body': json.dumps({}),  # no body needed for redirects
    }


def response_from_error(error: DAOError) -> dict:
    """Map a registry error onto its HTTP response by exception type"""
    for error_type, (status_code, reason) in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return response_error(status_code, reason, str(error), error.error_code)
    return response_500()
