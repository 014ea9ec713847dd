"""
WSGI config for the notification service.

Used by gunicorn and ``manage.py runserver``; Uvicorn deployments use
config.asgi instead.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
