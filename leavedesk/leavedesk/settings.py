# -*- coding: utf-8 -*-
"""
Django settings for leavedesk project.

Every deploy-specific value comes from the environment (or a `.env` file next to
manage.py), parsed into typed fields by `EnvSettings`; defaults are for local
development (SQLite, console e-mail).
"""
from __future__ import annotations
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent

# Load environment variables from .env file if it exists
load_dotenv(dotenv_path=BASE_DIR / ".env")


class EnvSettings(BaseSettings):
    """Environment variables read by the settings below."""
    model_config = SettingsConfigDict(extra="ignore")

    DJANGO_SECRET_KEY: str = "dev-insecure-leavedesk-key"
    DJANGO_DEBUG: bool = True
    DJANGO_ALLOWED_HOSTS: str = "localhost,127.0.0.1"
    TIME_ZONE: str = "Asia/Jakarta"
    MEDIA_ROOT: Optional[Path] = None

    # PostgreSQL is used when POSTGRES_DB is set
    POSTGRES_DB: str = ""
    POSTGRES_USER: str = "leavedesk"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_CONN_MAX_AGE: int = 60

    EMAIL_BACKEND: str = "django.core.mail.backends.console.EmailBackend"
    EMAIL_HOST: str = "localhost"
    EMAIL_PORT: int = 25
    EMAIL_HOST_USER: str = ""
    EMAIL_HOST_PASSWORD: str = ""
    EMAIL_USE_TLS: bool = False
    DEFAULT_FROM_EMAIL: str = "leavedesk@localhost"
    EMAIL_SUBJECT_PREFIX: str = "[Leavedesk] "

    LARK_LEAVE_WEBHOOK_URL: str = ""
    LARK_TIMEOUT: int = 8

    LEAVE_DEFAULT_ANNUAL_QUOTA: int = 12
    LEAVE_ALLOCATION_ATTEMPTS: int = 5
    LEAVE_NOTIFICATION_MAX_ATTEMPTS: int = 5
    LEAVE_LOG_LEVEL: str = "INFO"


env = EnvSettings()

SECRET_KEY = env.DJANGO_SECRET_KEY
DEBUG = env.DJANGO_DEBUG
ALLOWED_HOSTS = [h.strip() for h in env.DJANGO_ALLOWED_HOSTS.split(",") if h.strip()]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "drf_spectacular",
    "leaves",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "leavedesk.urls"

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

WSGI_APPLICATION = "leavedesk.wsgi.application"


# ====== Database ======
# PostgreSQL in production (row locks via SELECT ... FOR UPDATE).
# SQLite locally: IMMEDIATE transactions take the write lock at BEGIN, so
# concurrent atomic blocks queue up instead of racing.
if env.POSTGRES_DB:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": env.POSTGRES_DB,
            "USER": env.POSTGRES_USER,
            "PASSWORD": env.POSTGRES_PASSWORD,
            "HOST": env.POSTGRES_HOST,
            "PORT": env.POSTGRES_PORT,
            "CONN_MAX_AGE": env.POSTGRES_CONN_MAX_AGE,
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
            "OPTIONS": {
                "transaction_mode": "IMMEDIATE",
                "timeout": 30,
            },
            "TEST": {
                "NAME": BASE_DIR / "test_db.sqlite3",
            },
        }
    }

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = env.TIME_ZONE
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"
MEDIA_URL = "media/"
MEDIA_ROOT = env.MEDIA_ROOT or BASE_DIR / "media"


# ====== REST framework / OpenAPI ======
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
        "rest_framework.authentication.BasicAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Leavedesk API",
    "DESCRIPTION": "Leave application workflow: submit, review, approve.",
    "VERSION": "0.1.0",
    "SERVE_INCLUDE_SCHEMA": False,
}


# ====== Mail / Lark ======
EMAIL_BACKEND = env.EMAIL_BACKEND
EMAIL_HOST = env.EMAIL_HOST
EMAIL_PORT = env.EMAIL_PORT
EMAIL_HOST_USER = env.EMAIL_HOST_USER
EMAIL_HOST_PASSWORD = env.EMAIL_HOST_PASSWORD
EMAIL_USE_TLS = env.EMAIL_USE_TLS
DEFAULT_FROM_EMAIL = env.DEFAULT_FROM_EMAIL
EMAIL_SUBJECT_PREFIX = env.EMAIL_SUBJECT_PREFIX

LARK_LEAVE_WEBHOOK_URL = env.LARK_LEAVE_WEBHOOK_URL
LARK_TIMEOUT = env.LARK_TIMEOUT


# ====== Leave workflow ======
LEAVE_WORKFLOW = {
    "DEFAULT_ANNUAL_QUOTA": env.LEAVE_DEFAULT_ANNUAL_QUOTA,
    "DOCUMENT_NUMBER_PAD": 3,
    "ALLOCATION_ATTEMPTS": env.LEAVE_ALLOCATION_ATTEMPTS,
    "PAGE_SIZE": 10,
    "MAX_PAGE_SIZE": 100,
    "NOTIFICATION_MAX_ATTEMPTS": env.LEAVE_NOTIFICATION_MAX_ATTEMPTS,
}


# ====== Logging ======
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "leaves": {
            "level": env.LEAVE_LOG_LEVEL,
            "propagate": True,
        },
    },
}
