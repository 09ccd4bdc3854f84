"""Unit tests for the CleanupExpiredUrls AWS Lambda handler.

Verify that the scheduled Lambda sweeps expired short URLs from the registry
and reports configuration failures instead of crashing.

Test coverage includes:
    1. Successful sweep
       - Ensures expired records are removed and counted, live ones kept.
       - Ensures an empty sweep reports zero removals.
    2. Failure reporting
       - Ensures registry configuration errors are reported with reason and error class.
    3. Failure propagation
       - Ensures unexpected exceptions are not swallowed, so EventBridge can retry.

Fixtures:
    - `event`: generic EventBridge scheduled event payload.
"""

import json
from unittest.mock import MagicMock

import pytest

from urlshortener.lambdas.cleanup_expired_urls import app
from urlshortener.dao.memory import ShortURLMemoryDAO
from urlshortener.exceptions import BadConfigurationError, MissingEnvironmentVariableError


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture()
def event():
    return {
        'source': 'aws.events',
        'detail-type': 'Scheduled Event',
        'detail': {},
    }


@pytest.fixture(autouse=True)
def _patch_lambda_dependencies(monkeypatch, dao):
    monkeypatch.setattr(app, 'get_registry', lambda: dao)


# -------------------------------
# 1. Successful sweep
# -------------------------------


def test_lambda_handler_sweeps_expired(event, dao, clock):
    """Ensure Lambda removes expired records only."""
    dao.insert('https://example.com/a', 1, 'old1')
    dao.insert('https://example.com/b', 5, 'old2')
    dao.insert('https://example.com/c', 60, 'live1')
    clock.advance(minutes=10)

    result = json.loads(app.lambda_handler(event, None))

    assert result == {
        'status': 'success',
        'removed': 2,
        'message': 'Removed 2 expired short URL(s)',
    }
    assert dao.reserved() == frozenset({'live1'})


def test_lambda_handler_nothing_to_sweep(event, dao):
    dao.insert('https://example.com/a', 30, 'live1')

    result = json.loads(app.lambda_handler(event, None))

    assert result['status'] == 'success'
    assert result['removed'] == 0
    assert dao.count() == 1


def test_lambda_handler_frees_shortcodes(event, dao, clock):
    dao.insert('https://example.com/a', 1, 'reuse1')
    clock.advance(minutes=2)

    app.lambda_handler(event, None)

    assert dao.insert('https://example.com/new', 30, 'reuse1').shortcode == 'reuse1'


# -------------------------------
# 2. Failure reporting
# -------------------------------


@pytest.mark.parametrize(
    'exception, expected_error',
    [
        (BadConfigurationError('bad registry section'), 'BadConfigurationError'),
        (MissingEnvironmentVariableError("Missing required environment variables: 'APPCONFIG_APP_ID'"), 'MissingEnvironmentVariableError'),
    ],
)
def test_lambda_handler_reports_configuration_errors(monkeypatch, event, exception, expected_error):
    def _broken_registry():
        raise exception

    monkeypatch.setattr(app, 'get_registry', _broken_registry)

    result = json.loads(app.lambda_handler(event, None))

    assert result['status'] == 'error'
    assert result['message'] == 'Failed to remove expired short URLs'
    assert result['reason'] == str(exception)
    assert result['error'] == expected_error


# -------------------------------
# 3. Failure propagation
# -------------------------------


def test_lambda_handler_propagates_unexpected_errors(monkeypatch, event):
    registry = MagicMock(spec=ShortURLMemoryDAO)
    registry.cleanup.side_effect = RuntimeError('boom')
    monkeypatch.setattr(app, 'get_registry', lambda: registry)

    with pytest.raises(RuntimeError, match='boom'):
        app.lambda_handler(event, None)
