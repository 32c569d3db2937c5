class StoreError(Exception):
    """Base class for document store failures."""

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.message = message
        self.path = path


class StoreNotFoundError(StoreError):
    pass


class StoreParseError(StoreError):
    pass


class StoreWriteError(StoreError):
    pass
