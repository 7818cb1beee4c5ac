class FeedClientError(Exception):
    pass


class FetchError(FeedClientError):
    """A page or community listing could not be retrieved."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
