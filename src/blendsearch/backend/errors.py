class BackendError(Exception):
    """Raised by an adapter when a search or retrieve call fails."""

    def __init__(self, backend: str, message: str) -> None:
        super().__init__(f"{backend}: {message}")
        self.backend = backend


class BackendUnavailableError(BackendError):
    """The backend could not be reached or timed out."""
