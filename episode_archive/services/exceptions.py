"""Domain-specific exceptions."""


class SearchServiceError(Exception):
    pass


class NetworkFailure(SearchServiceError):
    pass


class BackendError(SearchServiceError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SessionClosed(SearchServiceError):
    pass
