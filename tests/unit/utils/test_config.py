"""Unit tests for configuration utilities in config.py

Test coverage includes:

1. Environment variable resolution
   - Ensures app_env() and app_name() correctly read environment variables.

2. RegistrySettings
   - 2.1. Defaults and the derived sweep interval.
   - 2.2. from_config() reads known keys, ignores unknown ones, defaults missing ones.
   - 2.3. Invalid values raise BadConfigurationError.

3. Configuration loading behavior
   - Ensures load_config() returns the `registry` section of the AppConfig document.
   - Validates that AppConfig fetching is safely isolated via monkeypatching.
   - Ensures load_config() raises ClientError when AppConfig calls fail.
   - Ensures load_config() refuses to run without AppConfig identifiers.
"""

import os
import json
from io import BytesIO
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
import botocore

from urlshortener.utils import config
from urlshortener.utils.config import RegistrySettings
from urlshortener.exceptions import BadConfigurationError, MissingEnvironmentVariableError


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    """Set up environment variables for testing."""
    monkeypatch.setenv('APPCONFIG_APP_ID', 'app123')
    monkeypatch.setenv('APPCONFIG_ENV_ID', 'env123')
    monkeypatch.setenv('APPCONFIG_PROFILE_ID', 'prof123')
    monkeypatch.delenv('APPCONFIG_AGENT_URL', raising=False)


@pytest.fixture
def appconfig_payload():
    """Provide a default AppConfig payload used by multiple tests."""
    # fmt: off
    return {
        'build': 42,
        'registry': {
            'default_validity_minutes': 60,
            'shortcode_length': 8,
            'max_generation_attempts': 100,
            'sweep_interval_seconds': 300,
        },
    }
    # fmt: on


@pytest.fixture
def appconfig_client(monkeypatch, appconfig_payload):
    """Mock the AppConfig Data client returned by boto3.client()."""
    monkey_bytes = BytesIO(json.dumps(appconfig_payload).encode('utf-8'))
    mock_appconfig = MagicMock()
    mock_appconfig.start_configuration_session.return_value = {'InitialConfigurationToken': 'monkey_token'}
    mock_appconfig.get_latest_configuration.return_value = {'Configuration': monkey_bytes}
    monkeypatch.setattr(config.boto3, 'client', lambda service: mock_appconfig)
    return mock_appconfig


# -------------------------------
# 1. Environment variable resolution
# -------------------------------


def test_app_env(monkeypatch):
    """Ensure app_env() returns the correct environment value from APP_ENV"""
    monkeypatch.setitem(os.environ, 'APP_ENV', 'Test')
    assert config.app_env() == 'test'


def test_app_env_defaults_to_local(monkeypatch):
    monkeypatch.delitem(os.environ, 'APP_ENV', raising=False)
    assert config.app_env() == 'local'


def test_app_name(monkeypatch):
    """Ensure app_name() returns the correct environment value from APP_NAME"""
    monkeypatch.setitem(os.environ, 'APP_NAME', 'test-app')
    assert config.app_name() == 'test-app'


def test_app_name_not_set(monkeypatch):
    """Ensure app_name() returns None when APP_NAME is not set"""
    monkeypatch.delitem(os.environ, 'APP_NAME', raising=False)
    assert config.app_name() is None


# -------------------------------
# 2.1. RegistrySettings defaults
# -------------------------------


def test_registry_settings_defaults():
    settings = RegistrySettings()

    assert settings.default_validity_minutes == 30
    assert settings.shortcode_length == 6
    assert settings.max_generation_attempts == 5000
    assert settings.sweep_interval_seconds is None
    assert settings.sweep_interval is None


def test_registry_settings_sweep_interval():
    assert RegistrySettings(sweep_interval_seconds=90).sweep_interval == timedelta(seconds=90)


# -------------------------------
# 2.2. RegistrySettings.from_config()
# -------------------------------


def test_registry_settings_from_config(appconfig_payload):
    settings = RegistrySettings.from_config(appconfig_payload['registry'])

    assert settings == RegistrySettings(
        default_validity_minutes=60,
        shortcode_length=8,
        max_generation_attempts=100,
        sweep_interval_seconds=300,
    )


@pytest.mark.parametrize('section', [None, {}])
def test_registry_settings_from_empty_config(section):
    assert RegistrySettings.from_config(section) == RegistrySettings()


def test_registry_settings_ignores_unknown_keys(caplog):
    settings = RegistrySettings.from_config({'shortcode_length': 7, 'redis': {'host': 'monkey'}})

    assert settings.shortcode_length == 7
    assert 'Ignoring unknown registry configuration keys.' in caplog.text


def test_registry_settings_from_non_mapping():
    with pytest.raises(BadConfigurationError, match='must be a JSON object'):
        RegistrySettings.from_config(['shortcode_length', 7])


# -------------------------------
# 2.3. RegistrySettings validation
# -------------------------------


@pytest.mark.parametrize(
    'kwargs',
    [
        {'default_validity_minutes': 0},
        {'default_validity_minutes': 10081},
        {'default_validity_minutes': '30'},
        {'shortcode_length': 0},
        {'shortcode_length': True},
        {'max_generation_attempts': -1},
        {'max_generation_attempts': 1.5},
        {'sweep_interval_seconds': 0},
        {'sweep_interval_seconds': '60'},
    ],
)
def test_registry_settings_rejects_invalid_values(kwargs):
    with pytest.raises(BadConfigurationError):
        RegistrySettings(**kwargs)


# -------------------------------
# 3. Configuration loading behavior
# -------------------------------


def test_load_config_reads_registry_section(appconfig_client):
    """Ensure load_config() returns the registry section pulled from AppConfig."""
    result = config.load_config()

    assert result == {
        'default_validity_minutes': 60,
        'shortcode_length': 8,
        'max_generation_attempts': 100,
        'sweep_interval_seconds': 300,
    }
    appconfig_client.start_configuration_session.assert_called_once_with(
        ApplicationIdentifier='app123',
        EnvironmentIdentifier='env123',
        ConfigurationProfileIdentifier='prof123',
    )
    appconfig_client.get_latest_configuration.assert_called_once_with(
        ConfigurationToken='monkey_token',
    )


def test_load_config_without_registry_section(appconfig_client):
    """Ensure a document without a registry section yields an empty mapping."""
    appconfig_client.get_latest_configuration.return_value = {'Configuration': BytesIO(b'{"build": 1}')}
    assert config.load_config() == {}


def test_missing_appconfig_raises_error(monkeypatch):
    """Ensure load_config() propagates ClientError when AppConfig returns an error."""
    mock_appconfig = MagicMock()
    mock_appconfig.start_configuration_session.side_effect = botocore.exceptions.ClientError(
        {'Error': {'Code': 'ResourceNotFoundException'}}, 'StartConfigurationSession'
    )
    monkeypatch.setattr(config.boto3, 'client', lambda service: mock_appconfig)

    with pytest.raises(botocore.exceptions.ClientError):
        config.load_config()


@pytest.mark.parametrize('name', ['APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID', 'APPCONFIG_PROFILE_ID'])
def test_load_config_requires_appconfig_identifiers(monkeypatch, name):
    """Ensure load_config() fails fast without AppConfig identifiers and never calls AWS."""
    monkeypatch.delenv(name)
    client = MagicMock()
    monkeypatch.setattr(config.boto3, 'client', client)

    with pytest.raises(MissingEnvironmentVariableError, match=name):
        config.load_config()

    client.assert_not_called()
