from .cache import TranslationMemory, make_cache_key
from .fileio import atomic_write_text

__all__ = [
    "TranslationMemory",
    "make_cache_key",
    "atomic_write_text",
]
