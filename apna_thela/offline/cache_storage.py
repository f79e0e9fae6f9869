import threading
from typing import Dict, List, Optional, Tuple

from .models import HttpRequest, HttpResponse


CacheKey = Tuple[str, str]


class CacheStore:
    """A named request -> response collection.
    Entries are replaced wholesale on put; the last write wins.
    """

    def __init__(self, name: str, lock: threading.Lock):
        self.name = name
        self._lock = lock
        self._entries: Dict[CacheKey, HttpResponse] = {}

    def put(self, request: HttpRequest, response: HttpResponse) -> None:
        with self._lock:
            self._entries[request.cache_key] = response.clone()

    def match(self, request: HttpRequest) -> Optional[HttpResponse]:
        with self._lock:
            hit = self._entries.get(request.cache_key)
        return hit.clone() if hit is not None else None

    def keys(self) -> List[CacheKey]:
        with self._lock:
            return list(self._entries.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class CacheStorage:
    def __init__(self):
        self._lock = threading.Lock()
        self._stores: Dict[str, CacheStore] = {}

    def open(self, name: str) -> CacheStore:
        with self._lock:
            store = self._stores.get(name)
            if store is None:
                store = CacheStore(name, self._lock)
                self._stores[name] = store
            return store

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._stores.keys())

    def delete(self, name: str) -> bool:
        with self._lock:
            return self._stores.pop(name, None) is not None
