from localshortener.utils.config import app_env, app_name, project_root, app_prefix, load_config
from localshortener.utils.helpers import base_url, get_short_url, visitor_locale, require_environment, guarantee_500_response
from localshortener.utils.shortener import generate_shortcode
from localshortener.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'base_url',
    'get_short_url',
    'visitor_locale',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
