class ConfigurationError(Exception):
    """Settings are inconsistent with the selected backend."""


class StorageError(Exception):
    """The storage backend rejected a request or could not be reached.

    Absence of a record is never reported this way; lookups return None,
    listings return an empty list and deletes return False.
    """

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation}: {message}")
        self.operation = operation


class StreamFault(Exception):
    """The upstream completion stream failed mid-generation."""
