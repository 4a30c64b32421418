import os


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "super-secret-key")

    SQLALCHEMY_DATABASE_URI = os.getenv("SQLALCHEMY_DATABASE_URI", "sqlite:///library.db")

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # tablolar migration yoksa factory içinde oluşturulur
    AUTO_CREATE_TABLES = _env_flag("AUTO_CREATE_TABLES", "1")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Kitap kapak görselleri
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(os.getcwd(), "upload"))
    ALLOWED_IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(5 * 1024 * 1024)))

    # boşsa uploads.serve_image üzerinden tam URL üretilir
    PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "")

    MAX_ACTIVE_BORROWS = int(os.getenv("MAX_ACTIVE_BORROWS", "3"))


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    AUTO_CREATE_TABLES = True
    LOG_LEVEL = "DEBUG"
