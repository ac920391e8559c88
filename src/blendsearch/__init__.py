from blendsearch.backend import AbstractBackend, BackendError, Collection, Query, Record
from blendsearch.blender import BlendedCollection, BlenderBackend, create_blender_backend

__all__ = [
    "AbstractBackend",
    "BackendError",
    "BlendedCollection",
    "BlenderBackend",
    "Collection",
    "Query",
    "Record",
    "create_blender_backend",
]
