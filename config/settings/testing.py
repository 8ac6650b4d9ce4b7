from .base import *  # noqa

DEBUG = True

# Use SQLite for testing to avoid needing a running PostgreSQL instance.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "test_db.sqlite3",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_CLASSES": [],
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

APP_ENV = "test"
SITE_URL = "https://run.example.com"
FRONTEND_BASE_URL = "https://run.example.com"
JENGA_MERCHANT_CODE = "TEST123"
JENGA_API_KEY = ""
JENGA_CONSUMER_SECRET = ""
JENGA_PRIVATE_KEY_BASE64 = ""
JENGA_PRIVATE_KEY = ""
JENGA_PRIVATE_KEY_PATH = str(BASE_DIR / "does-not-exist.pem")
JENGA_REQUIRE_SIGNATURE = False
