from urlshortener.utils.config import app_env, app_name, project_root, app_prefix, load_config, ShortenerSettings
from urlshortener.utils.helpers import get_short_url, client_address, require_environment, guarantee_500_response
from urlshortener.utils.shortener import generate_shortcode
from urlshortener.utils.validators import is_url, is_self_referencing, enforce_http
from urlshortener.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'ShortenerSettings',
    'get_short_url',
    'client_address',
    'require_environment',
    'guarantee_500_response',
    'is_url',
    'is_self_referencing',
    'enforce_http',
    'initialize_logging',
]
