"""
Django settings for the bigger_than_cali project.

Everything deployment-specific comes from environment variables. There is no
database: the site reads a static dataset JSON produced by
``manage.py refresh_dataset``.

The bundled data/countries.json is a small seed (27 economies) so the site
starts out of the box. Run ``python manage.py refresh_dataset`` before serving
to fetch the full World Bank list, then restart the server.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "insecure-dev-key-change-me")

DEBUG = env_bool("DJANGO_DEBUG")

ALLOWED_HOSTS = [h.strip() for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",") if h.strip()]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "countries",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

# The catch-all country route matches "<name>/" too, so CommonMiddleware
# would turn every not-found page into a redirect.
APPEND_SLASH = False

ROOT_URLCONF = "bigger_than_cali.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {"context_processors": []},
    },
]

WSGI_APPLICATION = "bigger_than_cali.wsgi.application"

DATABASES = {}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "UNAUTHENTICATED_USER": None,
}

# Comparison data
DATASET_PATH = os.environ.get("BIGGER_DATASET_PATH", str(BASE_DIR / "data" / "countries.json"))
FAVICON_PATH = os.environ.get("BIGGER_FAVICON_PATH", str(BASE_DIR / "data" / "favicon.png"))
SMALLER_HOST_MARKER = os.environ.get("SMALLER_HOST_MARKER", "smallerthancali")
FETCH_TIMEOUT = int(os.environ.get("BIGGER_FETCH_TIMEOUT", "15"))

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "{levelname} {asctime} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "countries": {
            "handlers": ["console"],
            "level": os.environ.get("DJANGO_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
