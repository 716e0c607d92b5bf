# backend/asgi.py
"""
PATH: backend/asgi.py

ASGI entrypoint; same settings selection as wsgi.py.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_asgi_application()
