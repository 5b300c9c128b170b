# config/settings/test.py
from .base import *  # noqa

DEBUG = False
SECRET_KEY = "test-secret-key"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

CASE_BILLING_DEFAULT_VAT_RATE = "25.00"
CASE_BILLING_ADMIN_GROUP = "ADMIN"
CASE_BILLING_CURRENCY_SUFFIX = "kr"

LOGGING["loggers"]["fs_core"]["level"] = "WARNING"
