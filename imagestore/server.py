import socket

import structlog
from werkzeug.serving import make_server

from . import create_app
from .errors import DatabaseConnectionError, ListenError, SchemaMigrationError
from .services.schema_service import connect_database, migrate_schema


logger = structlog.get_logger(__name__)


def bootstrap(app):
    """Connect and migrate; either failure is fatal to the caller."""
    connect_database(app)
    migrate_schema(app)
    return app


def open_listener(host: str, port: int) -> socket.socket:
    try:
        return socket.create_server((host, port), family=socket.AF_INET)
    except OSError as exc:
        raise ListenError(host, port, exc.strerror or str(exc)) from exc


def serve(app) -> None:
    """Serve ``app`` on the configured address with one thread per request."""
    host = app.config["LISTEN_HOST"]
    port = app.config["LISTEN_PORT"]
    listener = open_listener(host, port)
    # werkzeug exits the process on bind errors, so it gets an already bound socket
    server = make_server(host, port, app, threaded=True, fd=listener.fileno())
    logger.info("Listening", host=host, port=port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.server_close()
        listener.close()


def main() -> int:
    app = create_app()
    try:
        bootstrap(app)
        serve(app)
    except (DatabaseConnectionError, SchemaMigrationError, ListenError) as exc:
        logger.critical("Startup failed", error=str(exc), error_type=type(exc).__name__)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
