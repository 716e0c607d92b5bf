# backend/wsgi.py
"""
WSGI entrypoint for the ledger service.
Uses dev settings unless DJANGO_SETTINGS_MODULE is exported by the host
(production must export backend.settings.prod).
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_wsgi_application()
