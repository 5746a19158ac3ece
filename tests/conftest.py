import pytest

from imagestore import create_app
from imagestore.extensions import db
from imagestore.server import bootstrap


@pytest.fixture
def static_root(tmp_path):
    """A small site tree served by the static file routes."""
    root = tmp_path / "site"
    (root / "css").mkdir(parents=True)
    (root / "assets").mkdir()
    (root / "index.html").write_text("<!DOCTYPE html><title>Case designer</title>\n")
    (root / "app.js").write_text("const canvas = document.getElementById('caseCanvas');\n")
    (root / "css" / "style.css").write_text("body { margin: 0; }\n")
    (root / "assets" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR")
    (root / "assets" / "readme.txt").write_text("assets\n")
    (tmp_path / "secret.txt").write_text("outside the root\n")
    return root


@pytest.fixture
def database_uri(tmp_path):
    return f"sqlite:///{tmp_path / 'images.db'}"


@pytest.fixture
def app(database_uri, static_root):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": database_uri,
        "STATIC_ROOT": str(static_root),
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def migrated_app(app):
    return bootstrap(app)


@pytest.fixture
def app_ctx(migrated_app):
    with migrated_app.app_context():
        yield migrated_app


@pytest.fixture
def store(app_ctx):
    return app_ctx.extensions["image_store"]


@pytest.fixture
def client(app):
    return app.test_client()
