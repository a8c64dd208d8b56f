import os

from urlshortener.constants import ENV


def running_locally() -> bool:
    """True under `sam local` (AWS_SAM_LOCAL=true) or when APP_ENV is 'local'

    Local runs read YAML configuration and let handler exceptions surface.
    """
    if os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true':
        return True
    return os.getenv(ENV.App.APP_ENV, '').lower() == 'local'
