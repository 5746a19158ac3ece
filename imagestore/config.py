import os

from sqlalchemy.engine import URL


POSTGRES_PORT = 5432
LISTEN_HOST = "0.0.0.0"
LISTEN_PORT = 8080

_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def build_database_uri(host: str, user: str, password: str, dbname: str) -> str:
    url = URL.create(
        "postgresql+psycopg2",
        username=user or None,
        password=password or None,
        host=host or None,
        port=POSTGRES_PORT,
        database=dbname or None,
        # TLS to the database is off on purpose; revisit before exposing the service.
        query={"sslmode": "disable"},
    )
    return url.render_as_string(hide_password=False)


class Config:
    """
    Base configuration object.

    Reads from environment at *instance* creation time so that values
    loaded via python-dotenv in create_app() are honored.
    """

    def __init__(self):
        self.DEBUG = _env_bool("FLASK_DEBUG", default=False)

        # Database: POSTGRES_* unless a full URI is given (tests, local SQLite)
        self.POSTGRES_HOST = os.getenv("POSTGRES_HOST", "localhost")
        self.POSTGRES_USER = os.getenv("POSTGRES_USER", "")
        self.POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "")
        self.POSTGRES_DB = os.getenv("POSTGRES_DB", "")
        self.POSTGRES_PORT = POSTGRES_PORT

        uri = os.getenv("SQLALCHEMY_DATABASE_URI")
        if not uri:
            uri = build_database_uri(
                self.POSTGRES_HOST,
                self.POSTGRES_USER,
                self.POSTGRES_PASSWORD,
                self.POSTGRES_DB,
            )
        self.SQLALCHEMY_DATABASE_URI = uri
        self.SQLALCHEMY_TRACK_MODIFICATIONS = False
        self.SQLALCHEMY_ENGINE_OPTIONS = engine_options_for(uri)

        # Static files: one level above the working directory by default
        self.STATIC_ROOT = os.path.abspath(os.getenv("STATIC_ROOT", ".."))
        self.STATIC_INDEX_FILE = "index.html"
        self.STATIC_DIRECTORY_LISTING = _env_bool("STATIC_DIRECTORY_LISTING", default=False)

        self.LISTEN_HOST = LISTEN_HOST
        self.LISTEN_PORT = LISTEN_PORT

        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.MIGRATIONS_DIR = os.path.join(_PROJECT_ROOT, "migrations")

    def __call__(self):
        # Lets Config() be handed to app.config.from_object either way
        return self


def engine_options_for(uri: str) -> dict:
    if uri.startswith("sqlite"):
        return {}
    return {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }
