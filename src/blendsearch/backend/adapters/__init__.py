from blendsearch.backend.adapters.static import StaticBackend

__all__ = ["StaticBackend"]
