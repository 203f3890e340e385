#
# Copyright 2026 Red Hat, Inc.
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
#
"""
Django settings for the kube-guard project.

All values can be overridden from the environment, see kubeguard.env.
"""

import os
import sys

from .env import ENVIRONMENT

# Build paths inside the project like this: os.path.join(BASE_DIR, ...)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

SECRET_KEY = ENVIRONMENT.get_value("DJANGO_SECRET_KEY", default="kubeguard-local-development-only")

DEBUG = ENVIRONMENT.bool("DJANGO_DEBUG", default=False)

ALLOWED_HOSTS = ENVIRONMENT.list("DJANGO_ALLOWED_HOSTS", default=["*"])

INSTALLED_APPS = [
    "django_prometheus",
    "rest_framework",
    "api",
    "privilege",
]

MIDDLEWARE = [
    "django_prometheus.middleware.PrometheusBeforeMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "kubeguard.middleware.RequestLoggingMiddleware",
    "django_prometheus.middleware.PrometheusAfterMiddleware",
]

ROOT_URLCONF = "kubeguard.urls"

WSGI_APPLICATION = "kubeguard.wsgi.application"

# The service keeps no state of its own.
DATABASES = {}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

API_PATH_PREFIX = ENVIRONMENT.get_value("API_PATH_PREFIX", default="api/")

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
    "EXCEPTION_HANDLER": "api.common.exception_handler.custom_exception_handler",
    "UNAUTHENTICATED_USER": None,
    # "format" is a search field, not a renderer override.
    "URL_FORMAT_OVERRIDE": None,
}

# Kubernetes access
KUBERNETES_IN_CLUSTER = ENVIRONMENT.bool("KUBERNETES_IN_CLUSTER", default=False)
KUBECONFIG = ENVIRONMENT.get_value("KUBECONFIG", default=os.path.join(os.path.expanduser("~"), ".kube", "config"))
KUBERNETES_CONTEXT = ENVIRONMENT.get_value("KUBERNETES_CONTEXT", default="")
KUBERNETES_REQUEST_TIMEOUT = ENVIRONMENT.float("KUBERNETES_REQUEST_TIMEOUT", default=15.0)

# Privilege search
PRIVILEGE_NAMESPACE = ENVIRONMENT.get_value("PRIVILEGE_NAMESPACE", default="")
PRIVILEGE_MAX_WORKERS = ENVIRONMENT.int("PRIVILEGE_MAX_WORKERS", default=1)

# Logging
# https://docs.djangoproject.com/en/4.2/topics/logging/
DJANGO_LOGGING_LEVEL = ENVIRONMENT.get_value("DJANGO_LOG_LEVEL", default="INFO")
KUBEGUARD_LOGGING_LEVEL = ENVIRONMENT.get_value("KUBEGUARD_LOG_LEVEL", default="INFO")
LOGGING_HANDLERS = ENVIRONMENT.list("DJANGO_LOG_HANDLERS", default=["console"])
VERBOSE_FORMATTING = "[%(asctime)s] %(levelname)s %(name)s %(funcName)s:%(lineno)d %(message)s"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {"format": VERBOSE_FORMATTING},
        "ecs_formatter": {"()": "kubeguard.ECSCustom.ECSCustomFormatter"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "verbose", "stream": sys.stdout},
        "ecs": {"class": "logging.StreamHandler", "formatter": "ecs_formatter", "stream": sys.stdout},
    },
    "loggers": {
        "django": {"handlers": LOGGING_HANDLERS, "level": DJANGO_LOGGING_LEVEL},
        "api": {"handlers": LOGGING_HANDLERS, "level": KUBEGUARD_LOGGING_LEVEL, "propagate": False},
        "kubeguard": {"handlers": LOGGING_HANDLERS, "level": KUBEGUARD_LOGGING_LEVEL, "propagate": False},
        "privilege": {"handlers": LOGGING_HANDLERS, "level": KUBEGUARD_LOGGING_LEVEL, "propagate": False},
    },
}
