import os

os.environ.setdefault("DEBUG", "1")
os.environ.pop("DATABASE_URL", None)
os.environ.pop("DB_HOST", None)

from .settings import *  # noqa: F401,F403,E402


DEBUG = True
SECRET_KEY = SECRET_KEY or "test-key"
DATABASES = {"default": {"ENGINE": "django.db.backends.sqlite3", "NAME": ":memory:"}}

# Entorno de pruebas local: evita dependencia de whitenoise en la venv local.
MIDDLEWARE = [m for m in MIDDLEWARE if m != "whitenoise.middleware.WhiteNoiseMiddleware"]
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}

# Las pruebas nunca suben a Cloudinary real.
CLOUDINARY_CLOUD_NAME = ""
CLOUDINARY_API_KEY = ""
CLOUDINARY_API_SECRET = ""
SEDE_IMAGEN_MAX_BYTES = 5 * 1024 * 1024
