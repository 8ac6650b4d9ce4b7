from .base import *  # noqa

DEBUG = True

# Use local memory cache in development to avoid requiring Redis.
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# The Jenga UAT sandbox has no merchant code until onboarding; sign against a placeholder.
JENGA_MERCHANT_CODE = JENGA_MERCHANT_CODE or "DEVMERCHANT"  # noqa: F405

LOGGING["loggers"]["payments"]["level"] = "DEBUG"  # noqa: F405
