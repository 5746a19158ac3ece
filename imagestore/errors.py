class ImageStoreError(Exception):
    """Base class for every error this service raises on purpose."""


class DatabaseConnectionError(ImageStoreError):
    """The database could not be reached or refused the credentials."""


class SchemaMigrationError(ImageStoreError):
    """The schema could not be brought to the shape the models need."""


class ImageNotFoundError(ImageStoreError):
    def __init__(self, image_id):
        super().__init__(f"image {image_id} not found")
        self.image_id = image_id


class StoreWriteError(ImageStoreError):
    """A write to the images table failed (constraint violation, lost connection...)."""


class ListenError(ImageStoreError):
    def __init__(self, host: str, port: int, reason: str):
        super().__init__(f"cannot listen on {host}:{port}: {reason}")
        self.host = host
        self.port = port
