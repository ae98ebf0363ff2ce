class SeedError(Exception):
    """A seeding run failed; `message` is what the caller gets back."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SeedConnectionError(SeedError):
    """Could not reach or verify the database. The only retried failure."""
