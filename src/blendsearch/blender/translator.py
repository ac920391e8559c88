from abc import ABC, abstractmethod
from collections.abc import Mapping

import structlog

from blendsearch.backend.types import Query

_logger = structlog.get_logger()


class QueryTranslator(ABC):
    @abstractmethod
    def translate(self, query: Query) -> Query:
        """Return the secondary backend's equivalent of a primary query."""
        ...


class IdentityTranslator(QueryTranslator):
    def translate(self, query: Query) -> Query:
        return query


class FieldMappingTranslator(QueryTranslator):
    """Renames filter fields from the primary vocabulary to the secondary one.

    Fields without a mapping are passed through unchanged.
    """

    def __init__(self, mappings: Mapping[str, str]) -> None:
        self._mappings = dict(mappings)

    def translate(self, query: Query) -> Query:
        if not self._mappings or not query.filters:
            return query

        filters = {self._mappings.get(key, key): value for key, value in query.filters.items()}
        _logger.debug("query_translated", filters=filters)
        return Query(text=query.text, filters=filters)
