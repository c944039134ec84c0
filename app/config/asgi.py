"""
ASGI config for the ChatGroove store.

Clients poll the HTTP API, so only the plain Django ASGI application
is exposed. Uvicorn uses this entry point.

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/howto/deployment/asgi/
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_asgi_application()
