# backend/settings.py - Adventy backend settings
from pathlib import Path
from decouple import AutoConfig, Csv
from datetime import date
import os

BASE_DIR = Path(__file__).resolve().parent.parent
config = AutoConfig(search_path=BASE_DIR)

# ==========================================
# BASIC CONFIGURATION
# ==========================================
SECRET_KEY = config("ADVENTY_SECRET_KEY", default="django-insecure-adventy-local-development-key")
DEBUG = config('DEBUG', default=False, cast=bool)
ALLOWED_HOSTS = config('ADVENTY_ALLOWED_HOSTS', default='*', cast=Csv())

# ==========================================
# ADVENTURE CALENDAR CONFIGURATION
# ==========================================
# Campaign window is [start, end) in UTC calendar dates.
# Override secrets are opaque high-entropy strings; empty disables the bypass.
ADVENTY = {
    'CAMPAIGN_START': config('ADVENTY_CAMPAIGN_START', default='2025-12-10', cast=date.fromisoformat),
    'CAMPAIGN_END': config('ADVENTY_CAMPAIGN_END', default='2026-01-01', cast=date.fromisoformat),
    'ENFORCE_DATE_PASSED': config('ADVENTY_ENFORCE_DATE_PASSED', default=True, cast=bool),
    'CONTENT_FILE': config('ADVENTY_CONTENT_FILE', default=str(BASE_DIR / 'api' / 'data' / 'adventures.json')),
    'OVERRIDE_SECRETS': {
        'SKIP_IN_RANGE': config('ADVENTY_SKIP_IN_RANGE_SECRET', default=''),
        'SKIP_NOT_APPEARED': config('ADVENTY_SKIP_NOT_APPEARED_SECRET', default=''),
        'SKIP_PASSED': config('ADVENTY_SKIP_PASSED_SECRET', default=''),
    },
}

# ==========================================
# DJANGO APPS
# ==========================================
DJANGO_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'django.contrib.staticfiles',
]

THIRD_PARTY_APPS = [
    'corsheaders',
    'rest_framework',
    'django_prometheus',
]

LOCAL_APPS = [
    'api.apps.ApiConfig',
]

INSTALLED_APPS = DJANGO_APPS + THIRD_PARTY_APPS + LOCAL_APPS

# ==========================================
# REST FRAMEWORK
# ==========================================
# No user accounts: the only access control is the override secret mechanism.
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'UNAUTHENTICATED_USER': None,
    'DEFAULT_THROTTLE_CLASSES': [
        'rest_framework.throttling.AnonRateThrottle',
    ],
    'DEFAULT_THROTTLE_RATES': {
        'anon': config('ADVENTY_ANON_THROTTLE_RATE', default='120/min'),
    }
}

# ==========================================
# MIDDLEWARE
# ==========================================
MIDDLEWARE = [
    # Prometheus metrics - must be first
    'django_prometheus.middleware.PrometheusBeforeMiddleware',

    # Correlation ID - early for request tracking
    'api.middleware.correlation_id.CorrelationIDMiddleware',

    # Kubernetes probe endpoints - bypass SSL redirect BEFORE SecurityMiddleware
    'api.middleware.probe_no_redirect.ProbeNoRedirectMiddleware',

    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',

    # Prometheus metrics - must be last
    'django_prometheus.middleware.PrometheusAfterMiddleware',
]

ROOT_URLCONF = 'backend.urls'

WSGI_APPLICATION = 'backend.wsgi.application'

# ==========================================
# DATABASES
# ==========================================
# Adventy keeps no state: content is a static file loaded at startup.
DATABASES = {}

PROMETHEUS_EXPORT_MIGRATIONS = False

# ==========================================
# CACHE
# ==========================================
# Used by the anonymous throttle; share it across workers with Redis.
REDIS_URL = config("REDIS_URL", default="")

if REDIS_URL:
    CACHES = {
        'default': {
            'BACKEND': 'django_redis.cache.RedisCache',
            'LOCATION': REDIS_URL,
            'OPTIONS': {
                'CLIENT_CLASS': 'django_redis.client.DefaultClient',
            },
        }
    }
else:
    CACHES = {
        'default': {
            'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
            'LOCATION': 'adventy-cache',
        }
    }

# ==========================================
# LOGGING
# ==========================================
LOG_DIR = Path(config('ADVENTY_LOG_DIR', default=str(BASE_DIR / 'logs')))

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {message}',
            'style': '{',
        },
        'json': {
            '()': 'pythonjsonlogger.jsonlogger.JsonFormatter',
            'format': '%(asctime)s %(name)s %(levelname)s %(message)s %(pathname)s %(lineno)d %(funcName)s %(correlation_id)s',
        },
    },
    'filters': {
        'correlation_id': {
            '()': 'api.middleware.logging_filter.CorrelationIDFilter',
        },
    },
    'handlers': {
        'file': {
            'level': 'INFO',
            'class': 'logging.FileHandler',
            'filename': LOG_DIR / 'adventy.log',
            'formatter': 'verbose',
            'filters': ['correlation_id'],
        },
        'console': {
            'level': 'DEBUG' if DEBUG else 'INFO',
            'class': 'logging.StreamHandler',
            'formatter': 'simple' if DEBUG else 'json',  # JSON in production for k8s
            'filters': ['correlation_id'],
        },
    },
    'loggers': {
        'api': {
            'handlers': ['file', 'console'],
            'level': 'INFO',
            'propagate': True,
        },
    },
}

# Create logs directory if it doesn't exist
os.makedirs(LOG_DIR, exist_ok=True)

# ==========================================
# INTERNATIONALIZATION
# ==========================================
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = False
USE_TZ = True

# ==========================================
# STATIC FILES
# ==========================================
STATIC_ROOT = 'staticfiles'
STATIC_URL = 'static/'
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ==========================================
# CORS CONFIGURATION
# ==========================================
if DEBUG:
    CORS_ALLOW_ALL_ORIGINS = True
else:
    CORS_ALLOWED_ORIGINS = config('ADVENTY_CORS_ALLOWED_ORIGINS', default='', cast=Csv())

CORS_ALLOW_HEADERS = [
    'accept',
    'accept-encoding',
    'content-type',
    'dnt',
    'origin',
    'user-agent',
    'x-requested-with',
    'x-request-id',
    'x-timezone',
    'adventy-skipsearchdateinrangevalidationsecret',
    'adventy-skipsearchdatehasnotappearedvalidationsecret',
    'adventy-skipsearchdatepassedvalidationsecret',
]

CORS_ALLOW_METHODS = [
    'GET',
    'OPTIONS',
]

CORS_EXPOSE_HEADERS = [
    'content-type',
    'x-request-id',
]

# ==========================================
# SECURITY SETTINGS
# ==========================================
if not DEBUG:
    SECURE_SSL_REDIRECT = config('ADVENTY_SECURE_SSL_REDIRECT', default=True, cast=bool)
    SECURE_HSTS_SECONDS = 31536000
    SECURE_HSTS_INCLUDE_SUBDOMAINS = True
    SECURE_CONTENT_TYPE_NOSNIFF = True

# Trusted proxy header for HTTPS detection
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
