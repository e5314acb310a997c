"""
WSGI config for the bigger_than_cali project.

It exposes the WSGI callable as a module-level variable named ``application``.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "bigger_than_cali.settings")

application = get_wsgi_application()
