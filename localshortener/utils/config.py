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
                "redis": { ... },
                "settings": { "default_validity_minutes": 30 }
            },
            "redirect_url": {
                "redis": { ... },
                "settings": { "redirect_delay_seconds": 1, "record_clicks": false }
            },
            "list_urls": {
                "redis": { ... }
            }
        }
    }

When running locally, a YAML file under `config/<handler>/<env>.yml` takes
precedence over AppConfig. It holds a single handler section plus the
`active_backend` key:

    config/
    ├── shorten_url/
    │   └── local.yml
    ├── redirect_url/
    │   └── local.yml
    └── list_urls/
        └── local.yml

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return application prefix for DAOs, or None if `APP_NAME` is not set.

    project_root() -> Path
        Return the absolute path to the project root directory, using
        `PROJECT_ROOT` when available.

    load_config(handler_name: str) -> dict
        Load configuration for a given Lambda and return it as
        `{<backend>: {...}, 'settings': {...}}`.

Example:
    Typical usage inside a Lambda handler:

        >>> from localshortener.utils.config import load_config
        >>> config = load_config('shorten_url')
        >>> print(config['redis']['host'])
        localhost
"""

import os
import json
import functools
import logging
from pathlib import Path
from typing import Any
from collections.abc import Callable

import boto3
import yaml

from localshortener.constants import ENV, Backend
from localshortener.exceptions import BadConfigurationError
from localshortener.utils.helpers import require_environment
from localshortener.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
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

    Reads PROJECT_ROOT and falls back to the directory holding the package.
    """
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, Path(__file__).resolve().parents[2]))


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'localshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'localshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _handler_config(backend: Any, section: Any) -> dict[str, Any]:
    """Reduce a handler's config section to the active backend and settings

    Raises:
        BadConfigurationError:
            If the backend is unknown or the section isn't a mapping.
    """
    if backend not in set(Backend):
        raise BadConfigurationError(f"Unsupported backend '{backend}' (expected one of: {', '.join(Backend)}).")
    if not isinstance(section, dict):
        raise BadConfigurationError(f'Handler configuration must be a mapping (given type: {type(section)}).')

    return {
        backend: dict(section.get(backend) or {}),
        'settings': dict(section.get('settings') or {}),
    }


def _load_local_config(func: Callable[[str], dict]) -> Callable[[str], dict]:
    """Decorator: load configuration from a local YAML file when running locally

    Behavior:
        - If the application is running locally and `config/<handler>/<env>.yml`
          exists under the project root, read it with PyYAML.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).
    """

    @functools.wraps(func)
    def wrapper(handler_name: str, *args, **kwargs) -> dict:
        path = project_root() / 'config' / handler_name / f'{app_env()}.yml'
        if not running_locally() or not path.is_file():
            return func(handler_name, *args, **kwargs)

        logger.debug('Loading config from local YAML file.', extra={'path': str(path), 'handlerName': handler_name})
        with path.open('r', encoding='utf-8') as f:
            config = yaml.safe_load(f) or {}

        return _handler_config(config.get('active_backend', Backend.MEMORY.value), config)

    return wrapper


@_load_local_config
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(handler_name: str) -> dict:
    """Load configuration for a given Lambda from AWS AppConfig

    Fetches the AppConfig JSON once and returns the section relevant
    to the requested Lambda function (e.g., 'shorten_url', 'redirect_url').

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        handler_name (str):
            Name of the Lambda (e.g., "shorten_url" or "redirect_url").

    Returns:
        dict: `{<backend>: {...}, 'settings': {...}}`

    Raises:
        MissingEnvironmentVariableError:
            If any of the AppConfig identifiers is missing.
        BadConfigurationError:
            If the document has no section for the handler or names an unknown backend.

    Example:
        >>> app_config = load_config('shorten_url')
        >>> app_config['redis']['host']
        'redis.internal'
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'handlerName': handler_name})

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

    try:
        section = config['configs'][handler_name]
    except KeyError as e:
        raise BadConfigurationError(f"AppConfig document has no configuration for '{handler_name}'.") from e

    data = _handler_config(config.get('active_backend'), section)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'handlerName': handler_name, 'build': config.get('build')})
    return data
