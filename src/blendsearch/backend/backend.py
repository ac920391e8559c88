from abc import ABC, abstractmethod

from blendsearch.backend.types import Collection, Params, Query, RecordCollection


class AbstractBackend(ABC):
    def __init__(self, identifier: str) -> None:
        self.identifier = identifier

    @abstractmethod
    def search(
        self,
        query: Query,
        offset: int,
        limit: int,
        params: Params | None = None,
    ) -> RecordCollection:
        """
        Run a query and return one page of results.

        Args:
            query: Search expression in this backend's form
            offset: Zero-based position of the first record to return
            limit: Maximum number of records; 0 asks for the total only
            params: Backend specific parameters (optional)

        Returns:
            Collection holding the page and the backend's total hit count

        Raises:
            BackendError: On transport or protocol failure
        """
        ...

    @abstractmethod
    def retrieve(self, record_id: str, params: Params | None = None) -> Collection:
        """Fetch a single record. An unknown id yields an empty collection."""
        ...


class RetrieveBatchCapable(ABC):
    """Mixin for backends that can fetch several records in one call."""

    @abstractmethod
    def retrieve_batch(self, ids: list[str], params: Params | None = None) -> Collection: ...
