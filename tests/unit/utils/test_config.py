"""Unit tests for configuration utilities in config.py

Test coverage includes:

1. Environment variable resolution
   - Ensures app_env(), app_name(), app_prefix() correctly read environment variables.

2. Project root resolution
   - Ensures project_root() reads PROJECT_ROOT and falls back to the working directory.

3. Configuration loading behavior
   - Ensures load_config() returns the active backend section and shortener settings from AppConfig.
   - Ensures load_config() propagates ClientError and requires AppConfig identifiers.
   - Ensures local YAML files are used when running locally.

4. Shortener settings
   - Defaults, config values, environment overrides and invalid values.
"""

import os
import json
from io import BytesIO
from datetime import timedelta
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import botocore

from urlshortener.utils import config
from urlshortener.utils.config import ShortenerSettings
from urlshortener.exceptions import BadConfigurationError, MissingEnvironmentVariableError


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    """Set up a cloud (non-local) environment for testing."""
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)
    monkeypatch.delenv('API_QUOTA', raising=False)
    monkeypatch.delenv('DOMAIN', raising=False)
    monkeypatch.setenv('APPCONFIG_APP_ID', 'app123')
    monkeypatch.setenv('APPCONFIG_ENV_ID', 'env123')
    monkeypatch.setenv('APPCONFIG_PROFILE_ID', 'prof123')


@pytest.fixture
def appconfig_payload():
    """Provide a default AppConfig payload used by multiple tests."""
    # fmt: off
    return {
        'build': 42,
        'active_backend': 'redis',
        'configs': {
            'test_lambda': {
                'redis': {
                    'host': 'monkey',
                    'port': 659595,
                    'db': 3
                }
            }
        },
        'shortener': {
            'api_quota': 20,
            'domain': 'short.ly'
        },
    }
    # fmt: on


@pytest.fixture
def appconfig_client(monkeypatch, appconfig_payload):
    """Mock the AppConfig Data client returned by boto3."""
    mock_appconfig = MagicMock()
    mock_appconfig.start_configuration_session.return_value = {'InitialConfigurationToken': 'monkey_token'}
    mock_appconfig.get_latest_configuration.return_value = {
        'Configuration': BytesIO(json.dumps(appconfig_payload).encode('utf-8')),
    }
    monkeypatch.setattr(config.boto3, 'client', lambda service: mock_appconfig)
    return mock_appconfig


# -------------------------------
# 1. Environment variable resolution
# -------------------------------


def test_app_env(monkeypatch):
    monkeypatch.setitem(os.environ, 'APP_ENV', 'Dev')
    assert config.app_env() == 'dev'


def test_app_env_default(monkeypatch):
    monkeypatch.delitem(os.environ, 'APP_ENV', raising=False)
    assert config.app_env() == 'local'


def test_app_name(monkeypatch):
    monkeypatch.setitem(os.environ, 'APP_NAME', 'test-app')
    assert config.app_name() == 'test-app'


def test_app_prefix(monkeypatch):
    monkeypatch.setitem(os.environ, 'APP_NAME', 'test-app')
    assert config.app_prefix() == 'test-app:test'


def test_app_prefix_without_app_name(monkeypatch):
    monkeypatch.delitem(os.environ, 'APP_NAME', raising=False)
    assert config.app_prefix() is None


# -------------------------------
# 2. Project root resolution
# -------------------------------


def test_project_root(monkeypatch):
    monkeypatch.setitem(os.environ, 'PROJECT_ROOT', '/monkey/path')
    assert config.project_root() == Path('/monkey/path')


def test_project_root_defaults_to_cwd(monkeypatch, tmp_path):
    monkeypatch.delitem(os.environ, 'PROJECT_ROOT', raising=False)
    monkeypatch.chdir(tmp_path)
    assert config.project_root() == tmp_path


# -------------------------------
# 3. Configuration loading behavior
# -------------------------------


def test_load_config(appconfig_client):
    result = config.load_config('test_lambda')

    assert result == {
        'redis': {'host': 'monkey', 'port': 659595, 'db': 3},
        'shortener': {'api_quota': 20, 'domain': 'short.ly'},
    }
    appconfig_client.start_configuration_session.assert_called_once_with(
        ApplicationIdentifier='app123',
        EnvironmentIdentifier='env123',
        ConfigurationProfileIdentifier='prof123',
    )
    appconfig_client.get_latest_configuration.assert_called_once_with(ConfigurationToken='monkey_token')


def test_load_config_without_shortener_section(monkeypatch, appconfig_payload):
    del appconfig_payload['shortener']
    mock_appconfig = MagicMock()
    mock_appconfig.start_configuration_session.return_value = {'InitialConfigurationToken': 'monkey_token'}
    mock_appconfig.get_latest_configuration.return_value = {'Configuration': BytesIO(json.dumps(appconfig_payload).encode('utf-8'))}
    monkeypatch.setattr(config.boto3, 'client', lambda service: mock_appconfig)

    assert config.load_config('test_lambda')['shortener'] == {}


def test_missing_appconfig_raises_error(monkeypatch):
    mock_appconfig = MagicMock()
    mock_appconfig.start_configuration_session.side_effect = botocore.exceptions.ClientError(
        {'Error': {'Code': 'ResourceNotFoundException'}}, 'StartConfigurationSession'
    )
    monkeypatch.setattr(config.boto3, 'client', lambda service: mock_appconfig)

    with pytest.raises(botocore.exceptions.ClientError):
        config.load_config('test_lambda')


def test_load_config_requires_appconfig_ids(monkeypatch):
    monkeypatch.delenv('APPCONFIG_ENV_ID')
    monkeypatch.delenv('APPCONFIG_PROFILE_ID')

    with pytest.raises(MissingEnvironmentVariableError, match="'APPCONFIG_ENV_ID', 'APPCONFIG_PROFILE_ID'"):
        config.load_config('test_lambda')


def test_load_local_config(monkeypatch, tmp_path):
    monkeypatch.setenv('APP_ENV', 'local')
    monkeypatch.setenv('PROJECT_ROOT', str(tmp_path))
    (tmp_path / 'config' / 'test_lambda').mkdir(parents=True)
    (tmp_path / 'config' / 'test_lambda' / 'local.yml').write_text(
        'redis:\n  host: localhost\n  port: 6379\nshortener:\n  api_quota: 5\n',
        encoding='utf-8',
    )
    boto3_client = MagicMock()
    monkeypatch.setattr(config.boto3, 'client', boto3_client)

    result = config.load_config('test_lambda')

    assert result == {'redis': {'host': 'localhost', 'port': 6379}, 'shortener': {'api_quota': 5}}
    boto3_client.assert_not_called()


def test_load_local_config_under_sam(monkeypatch, tmp_path):
    monkeypatch.setenv('AWS_SAM_LOCAL', 'true')
    monkeypatch.setenv('PROJECT_ROOT', str(tmp_path))
    (tmp_path / 'config' / 'test_lambda').mkdir(parents=True)
    (tmp_path / 'config' / 'test_lambda' / 'test.yml').write_text('memory: {}\n', encoding='utf-8')

    assert config.load_config('test_lambda') == {'memory': {}}


def test_load_local_config_missing_file(monkeypatch, tmp_path):
    monkeypatch.setenv('APP_ENV', 'local')
    monkeypatch.setenv('PROJECT_ROOT', str(tmp_path))

    with pytest.raises(FileNotFoundError):
        config.load_config('test_lambda')


def test_load_local_config_not_a_mapping(monkeypatch, tmp_path):
    monkeypatch.setenv('APP_ENV', 'local')
    monkeypatch.setenv('PROJECT_ROOT', str(tmp_path))
    (tmp_path / 'config' / 'test_lambda').mkdir(parents=True)
    (tmp_path / 'config' / 'test_lambda' / 'local.yml').write_text('- just\n- a list\n', encoding='utf-8')

    with pytest.raises(BadConfigurationError):
        config.load_config('test_lambda')


# -------------------------------
# 4. Shortener settings
# -------------------------------


def test_shortener_settings_defaults():
    settings = ShortenerSettings.from_config({'redis': {}})

    assert settings == ShortenerSettings()
    assert settings.api_quota == 10
    assert settings.quota_window == timedelta(minutes=30)
    assert settings.default_expiry_hours == 24
    assert settings.domain == 'localhost:3000'
    assert settings.shortcode_length == 6
    assert settings.max_shortcode_attempts == 5


def test_shortener_settings_from_config():
    # fmt: off
    settings = ShortenerSettings.from_config({
        'shortener': {
            'api_quota': 20,
            'quota_window_minutes': 60,
            'default_expiry_hours': 48,
            'domain': 'short.ly',
            'shortcode_length': 8,
            'max_shortcode_attempts': 1,
        }
    })
    # fmt: on

    assert settings == ShortenerSettings(
        api_quota=20,
        quota_window=timedelta(hours=1),
        default_expiry_hours=48,
        domain='short.ly',
        shortcode_length=8,
        max_shortcode_attempts=1,
    )


def test_shortener_settings_environment_overrides(monkeypatch):
    monkeypatch.setenv('API_QUOTA', '3')
    monkeypatch.setenv('DOMAIN', 'sho.rt')

    settings = ShortenerSettings.from_config({'shortener': {'api_quota': 20, 'domain': 'short.ly'}})

    assert settings.api_quota == 3
    assert settings.domain == 'sho.rt'


@pytest.mark.parametrize(
    'section',
    [
        {'api_quota': 0},
        {'api_quota': 'many'},
        {'quota_window_minutes': -30},
        {'shortcode_length': None},
        {'max_shortcode_attempts': 0},
    ],
)
def test_shortener_settings_invalid_values(section):
    with pytest.raises(BadConfigurationError):
        ShortenerSettings.from_config({'shortener': section})
