"""
ASGI config for leavedesk project.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "leavedesk.settings")

application = get_asgi_application()
