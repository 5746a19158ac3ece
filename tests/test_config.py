import os

from sqlalchemy.engine import make_url

from imagestore import create_app
from imagestore.config import Config, build_database_uri, engine_options_for


POSTGRES_ENV = {
    "POSTGRES_HOST": "db.internal",
    "POSTGRES_USER": "cases",
    "POSTGRES_PASSWORD": "p@ss word",
    "POSTGRES_DB": "casedesigner",
}


class TestConfig:

    def test_database_uri_from_postgres_env(self, monkeypatch):
        monkeypatch.delenv("SQLALCHEMY_DATABASE_URI", raising=False)
        for key, value in POSTGRES_ENV.items():
            monkeypatch.setenv(key, value)

        url = make_url(Config().SQLALCHEMY_DATABASE_URI)

        assert url.drivername == "postgresql+psycopg2"
        assert url.host == "db.internal"
        assert url.port == 5432
        assert url.username == "cases"
        assert url.password == "p@ss word"
        assert url.database == "casedesigner"
        assert url.query["sslmode"] == "disable"

    def test_explicit_uri_wins(self, monkeypatch):
        monkeypatch.setenv("SQLALCHEMY_DATABASE_URI", "sqlite:///override.db")
        monkeypatch.setenv("POSTGRES_HOST", "ignored")

        config = Config()

        assert config.SQLALCHEMY_DATABASE_URI == "sqlite:///override.db"
        assert config.SQLALCHEMY_ENGINE_OPTIONS == {}

    def test_pool_options_for_postgres(self):
        options = engine_options_for(build_database_uri("h", "u", "p", "d"))

        assert options["pool_size"] == 5
        assert options["max_overflow"] == 10
        assert options["pool_pre_ping"] is True

    def test_static_root_defaults_to_parent_of_cwd(self, monkeypatch, tmp_path):
        monkeypatch.delenv("STATIC_ROOT", raising=False)
        monkeypatch.chdir(tmp_path)

        assert Config().STATIC_ROOT == os.path.dirname(os.getcwd())

    def test_listen_address_is_fixed(self):
        config = Config()

        assert config.LISTEN_HOST == "0.0.0.0"
        assert config.LISTEN_PORT == 8080

    def test_directory_listing_flag(self, monkeypatch):
        monkeypatch.setenv("STATIC_DIRECTORY_LISTING", "yes")
        assert Config().STATIC_DIRECTORY_LISTING is True

        monkeypatch.setenv("STATIC_DIRECTORY_LISTING", "0")
        assert Config().STATIC_DIRECTORY_LISTING is False

    def test_migrations_dir_exists(self):
        assert os.path.isfile(os.path.join(Config().MIGRATIONS_DIR, "env.py"))

    def test_overrides_recompute_engine_options(self, monkeypatch, tmp_path):
        monkeypatch.delenv("SQLALCHEMY_DATABASE_URI", raising=False)

        app = create_app({"SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'x.db'}"})

        assert app.config["SQLALCHEMY_ENGINE_OPTIONS"] == {}

    def test_no_deployment_env_setting(self, monkeypatch):
        monkeypatch.setenv("FLASK_ENV", "production")

        assert "ENV" not in vars(Config())
