from dotenv import load_dotenv
from flask import Flask

from .config import Config, engine_options_for
from .errors import ImageNotFoundError, StoreWriteError
from .extensions import db, migrate
from .logging_setup import configure_logging


def create_app(overrides=None):
    """
    Build the Flask application.

    ``overrides`` is applied on top of the environment-driven Config, which
    is how tests point the app at a throwaway database and static root.
    Nothing here touches the database; see ``imagestore.server.bootstrap``.
    """
    load_dotenv()
    app = Flask(__name__, static_folder=None)

    app.config.from_object(Config())
    if overrides:
        app.config.update(overrides)
        if "SQLALCHEMY_DATABASE_URI" in overrides and "SQLALCHEMY_ENGINE_OPTIONS" not in overrides:
            app.config["SQLALCHEMY_ENGINE_OPTIONS"] = engine_options_for(app.config["SQLALCHEMY_DATABASE_URI"])

    configure_logging(app.config["LOG_LEVEL"])

    db.init_app(app)
    migrate.init_app(app, db, directory=app.config["MIGRATIONS_DIR"])

    from .services.image_service import ImageStore

    app.extensions["image_store"] = ImageStore(db)

    from .routes.static_files import static_bp

    app.register_blueprint(static_bp)

    from .cli import register_commands

    register_commands(app)

    @app.shell_context_processor
    def make_shell_context():
        from . import models
        return {"db": db, "store": app.extensions["image_store"], "Image": models.Image}

    @app.errorhandler(404)
    def not_found(error):
        return "404 page not found\n", 404, {"Content-Type": "text/plain; charset=utf-8"}

    @app.errorhandler(ImageNotFoundError)
    def image_not_found(error):
        return not_found(error)

    @app.errorhandler(StoreWriteError)
    @app.errorhandler(500)
    def server_error(error):
        return "500 internal server error\n", 500, {"Content-Type": "text/plain; charset=utf-8"}

    return app
