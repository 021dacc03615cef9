import logging
LOGGER = logging.getLogger(__name__)

import functools
import threading

_cache = {}
_cache_lock = threading.Lock()


def assistant_cache(func):
    """
    Process-wide memoization for factory methods such as Config.config().
    Arguments must be hashable; a classmethod's cls is part of the key.
    wrapper.cached(...) returns the stored value, or None, without calling func.
    """
    def cache_key(args, kwargs):
        return (func.__module__, func.__qualname__, args, tuple(sorted(kwargs.items())))

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        key = cache_key(args, kwargs)
        with _cache_lock:
            if key in _cache:
                return _cache[key]
        value = func(*args, **kwargs)
        with _cache_lock:
            # first writer wins if two callers raced on the same key
            return _cache.setdefault(key, value)

    def cached(*args, **kwargs):
        with _cache_lock:
            return _cache.get(cache_key(args, kwargs))

    wrapper.cached = cached
    return wrapper


def assistant_cache_clear():
    with _cache_lock:
        LOGGER.debug(f"Clearing {len(_cache)} cached entries")
        _cache.clear()
