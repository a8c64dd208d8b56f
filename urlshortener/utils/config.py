"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to
access configuration data stored in **AWS AppConfig**. Each environment
(`APP_ENV`) has a dedicated AppConfig *Environment* within the shared
AppConfig *Application* identified by `APP_NAME`. Configuration data is
stored as a JSON document under a configuration profile and deployed to
the corresponding environment.

The configuration JSON follows this structure:

    {
        "build": 42,
        "active_backend": "redis",
        "configs": {
            "shorten_url": {
                "redis": { "host": "...", "port": 6379, "db": 0 }
            },
            "redirect_url": {
                "redis": { ... }
            }
        },
        "shortener": {
            "api_quota": 10,
            "quota_window_minutes": 30,
            "default_expiry_hours": 24,
            "domain": "short.ly"
        }
    }

When running locally (APP_ENV=local or under SAM), configuration is read
from YAML files in a `config/` directory under the project root instead:

    config/
    ├── shorten_url/
    │   └── local.yml
    └── redirect_url/
        └── local.yml

Each local file holds the Lambda's section directly:

    redis:
      host: localhost
      port: 6379
    shortener:
      api_quota: 10
      domain: localhost:3000

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`), defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for stores, or None if `APP_NAME` is not set.

    project_root() -> Path
        Return the project root directory, using `PROJECT_ROOT` when available.

    load_config(lambda_name: str) -> dict
        Load configuration for a given Lambda (AppConfig, or local YAML when running locally).

Classes:
    ShortenerSettings
        Typed view over the `shortener` section with environment overrides.

Example:
    Typical usage inside a Lambda handler:

        >>> from urlshortener.utils.config import load_config, ShortenerSettings
        >>> app_config = load_config('shorten_url')
        >>> app_config['redis']['host']
        'localhost'
        >>> ShortenerSettings.from_config(app_config).api_quota
        10
"""

import os
import json
import logging
import functools
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from collections.abc import Callable

import boto3
import yaml

from urlshortener.constants import ENV, Defaults, TTL
from urlshortener.exceptions import BadConfigurationError
from urlshortener.types import AppConfig
from urlshortener.utils.helpers import require_environment
from urlshortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'

    Returns:
        str:
            Value of `APP_NAME` environment variable.
            None if variable is not set.
    """
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    """Return the absolute path to the project root directory

    Reads the PROJECT_ROOT environment variable. Falls back to the current working directory.
    """
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, os.getcwd()))


def app_prefix() -> str | None:
    """Return application prefix for stores

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'urlshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'urlshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _load_local_config(func: Callable[[str], AppConfig]) -> Callable[[str], AppConfig]:
    """Decorator: load configuration from local YAML files when running locally

    Behavior:
        - If the application is running locally, read
          `<project root>/config/<lambda_name>/<app env>.yml`.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).

    Raises:
        FileNotFoundError:
            If the local configuration file does not exist.
        BadConfigurationError:
            If the file does not contain a YAML mapping.
    """

    @functools.wraps(func)
    def wrapper(lambda_name: str, *args, **kwargs) -> AppConfig:
        if not running_locally():
            return func(lambda_name, *args, **kwargs)

        path = project_root() / 'config' / lambda_name / f'{app_env()}.yml'
        logger.debug('Trying to load local configuration file.', extra={'path': str(path), 'lambdaName': lambda_name})
        with open(path, encoding='utf-8') as f:
            config = yaml.safe_load(f)

        if not isinstance(config, dict):
            raise BadConfigurationError(f'Configuration file {path} must contain a mapping.')
        return config

    return wrapper


@_load_local_config
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(lambda_name: str) -> AppConfig:
    """Load configuration for a given Lambda from AWS AppConfig

    Fetches the AppConfig JSON once and returns the section relevant
    to the requested Lambda function (e.g., 'shorten_url', 'redirect_url')
    together with the shared 'shortener' settings.

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        lambda_name (str):
            Name of the Lambda (e.g., "shorten_url" or "redirect_url").

    Returns:
        dict: {<active backend>: {...}, 'shortener': {...}}

    Example:
        >>> app_config = load_config('shorten_url')
        >>> app_config['redis']['host']
        'redis-15501.host.docker.internal'
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    config = json.loads(content.decode('utf-8'))

    backend = config['active_backend']
    data = {
        backend: config['configs'][lambda_name][backend],
        'shortener': config.get('shortener', {}),
    }
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': config.get('build')})
    return data


def _positive_int(name: str, value) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise BadConfigurationError(f"Setting '{name}' must be an integer (given value: {value!r}).") from e
    if number <= 0:
        raise BadConfigurationError(f"Setting '{name}' must be positive (given value: {number}).")
    return number


@dataclass(frozen=True)
class ShortenerSettings:
    """Shortener settings (quota, window, expiry, domain)

    Attributes:
        api_quota (int):
            Shortening requests admitted per client per window.
        quota_window (timedelta):
            Length of a rate limiting window.
        default_expiry_hours (int):
            Link expiry used when a request omits it (or sends 0).
        domain (str):
            Public domain of the service, used to build short URLs and to reject self-referencing targets.
        shortcode_length (int):
            Length of generated shortcodes.
        max_shortcode_attempts (int):
            Generated shortcodes tried before giving up on collisions.
    """

    api_quota: int = Defaults.API_QUOTA
    quota_window: timedelta = timedelta(seconds=TTL.QUOTA_WINDOW)
    default_expiry_hours: int = Defaults.LINK_EXPIRY_HOURS
    domain: str = Defaults.DOMAIN
    shortcode_length: int = Defaults.SHORTCODE_LENGTH
    max_shortcode_attempts: int = Defaults.MAX_SHORTCODE_ATTEMPTS

    @classmethod
    def from_config(cls, app_config: AppConfig) -> 'ShortenerSettings':
        """Build settings from the 'shortener' config section

        The `API_QUOTA` and `DOMAIN` environment variables take precedence
        over the config document.

        Raises:
            BadConfigurationError:
                If a numeric setting is not a positive integer.
        """
        section = app_config.get('shortener') or {}
        api_quota = os.environ.get(ENV.Shortener.API_QUOTA) or section.get('api_quota', Defaults.API_QUOTA)
        domain = os.environ.get(ENV.Shortener.DOMAIN) or section.get('domain', Defaults.DOMAIN)
        window_minutes = section.get('quota_window_minutes', TTL.QUOTA_WINDOW // 60)

        return cls(
            api_quota=_positive_int('api_quota', api_quota),
            quota_window=timedelta(minutes=_positive_int('quota_window_minutes', window_minutes)),
            default_expiry_hours=_positive_int('default_expiry_hours', section.get('default_expiry_hours', Defaults.LINK_EXPIRY_HOURS)),
            domain=str(domain),
            shortcode_length=_positive_int('shortcode_length', section.get('shortcode_length', Defaults.SHORTCODE_LENGTH)),
            max_shortcode_attempts=_positive_int('max_shortcode_attempts', section.get('max_shortcode_attempts', Defaults.MAX_SHORTCODE_ATTEMPTS)),
        )
