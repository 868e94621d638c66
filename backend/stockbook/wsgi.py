"""WSGI config for the stockbook project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'stockbook.settings')

application = get_wsgi_application()
