from blendsearch.backend.backend import AbstractBackend, RetrieveBatchCapable
from blendsearch.backend.errors import BackendError, BackendUnavailableError
from blendsearch.backend.types import BackendSource, Collection, Params, Query, Record, RecordCollection

__all__ = [
    "AbstractBackend",
    "BackendError",
    "BackendSource",
    "BackendUnavailableError",
    "Collection",
    "Params",
    "Query",
    "Record",
    "RecordCollection",
    "RetrieveBatchCapable",
]
