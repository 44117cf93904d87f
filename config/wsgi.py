"""WSGI config for the booking core.

Exposes the WSGI application used by production WSGI servers, which is why
it defaults to the production settings module.
"""

import os
from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.prod')

application = get_wsgi_application()
