"""
stakeview preload cache

This package keeps network-wide preload data (validator sets and their
metadata) per network: fetched through an injected preloader, published in
memory for synchronous readers and persisted through pluggable storage.
"""

from .core import PreloadCache, Preloader
from .exceptions import (
    PreloadError,
    PreloadFetchError,
    InvalidPreloadDataError,
    UnknownNetworkError
)
from .storage import CacheStorage, InMemoryStorage, JsonFileStorage
from .redis_storage import RedisStorage

__all__ = [
    'PreloadCache',
    'Preloader',
    'PreloadError',
    'PreloadFetchError',
    'InvalidPreloadDataError',
    'UnknownNetworkError',
    'CacheStorage',
    'InMemoryStorage',
    'JsonFileStorage',
    'RedisStorage'
]
