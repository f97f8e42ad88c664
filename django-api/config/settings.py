"""Django settings for the festival schedule API.

Values come from environment variables; see ``config.env.get_from_env``.
"""

from pathlib import Path

import dj_database_url

from config.env import get_from_env, get_list, str_to_bool
from config.logs import DEBUG, LOGGING, TEST  # noqa: F401

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = get_from_env("SECRET_KEY", "insecure-dev-key" if DEBUG or TEST else None)

ALLOWED_HOSTS = get_list(get_from_env("ALLOWED_HOSTS", "localhost,127.0.0.1"))

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "festivals.apps.FestivalsConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
]

ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "config.wsgi.application"

DATABASE_URL = get_from_env("DATABASE_URL", f"sqlite:///{BASE_DIR / 'db.sqlite3'}")
DATABASES = {"default": dj_database_url.parse(DATABASE_URL, conn_max_age=0)}

CACHES = {
    "default": {
        "BACKEND": get_from_env("CACHE_BACKEND", "django.core.cache.backends.locmem.LocMemCache"),
        "LOCATION": get_from_env("CACHE_LOCATION", "festivals"),
    }
}

# Seconds the public schedule payload stays cached.
PUBLIC_SCHEDULE_CACHE_TTL = get_from_env("PUBLIC_SCHEDULE_CACHE_TTL", 300, type_cast=int)

# Seconds to wait for a Google Sheets CSV export.
GOOGLE_SHEETS_TIMEOUT = get_from_env("GOOGLE_SHEETS_TIMEOUT", 10.0, type_cast=float)

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "COERCE_DECIMAL_TO_STRING": False,
}

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

SESSION_COOKIE_SECURE = get_from_env("SECURE_COOKIES", False, type_cast=str_to_bool)
CSRF_COOKIE_SECURE = SESSION_COOKIE_SECURE
