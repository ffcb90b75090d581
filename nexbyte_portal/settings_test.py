import os

os.environ.setdefault("DJANGO_SECRET_KEY", "test-secret-key")
os.environ.setdefault("CERTIFICATE_SIGNING_SECRET", "test-certificate-secret")

from .settings import *  # noqa: E402,F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# artifact uploads are switched on per test
CLOUDINARY_CLOUD_NAME = ""
CLOUDINARY_API_KEY = ""
CLOUDINARY_API_SECRET = ""

MEDIA_ROOT = BASE_DIR / "test_media"  # noqa: F405

CLIENT_URL = "http://localhost:3000"
CERTIFICATE_COMPANY = "NexByte"
