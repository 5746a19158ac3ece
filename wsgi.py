from imagestore import create_app
from imagestore.server import bootstrap

# gunicorn wsgi:app; the schema is migrated once per worker under an advisory lock
app = bootstrap(create_app())
