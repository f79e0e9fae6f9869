"""Offline-first request policy for the Apna Thela app.

The policy plays the part of the browser service worker: it owns two
versioned cache stores (app shell and API data), decides for each request
whether to answer from the network, the cache or a built-in fallback, and
handles the sync / push lifecycle events.
"""
import logging
from typing import List, Optional

from starlette.concurrency import run_in_threadpool

from ..config import DATA_CACHE_NAME, STATIC_CACHE_NAME
from .cache_storage import CacheStorage
from .fallbacks import (
    API_PREFIX,
    PERIODIC_SYNC_TAG,
    PRIMARY_DATA_URL,
    SERVED_FROM_HEADER,
    SHELL_URLS,
    SYNC_TAG,
    fallback_response,
    offline_response,
)
from .fetcher import NetworkError
from .models import HttpRequest, HttpResponse, Notification, NotificationAction, WorkerState


logger = logging.getLogger(__name__)


class InstallError(Exception):
    """The app shell could not be cached; the worker is discarded."""


class Clients:
    """The pages controlled by the worker."""

    def __init__(self):
        self.claimed = False
        self.opened: List[str] = []

    def claim(self) -> None:
        self.claimed = True

    def open_window(self, url: str) -> None:
        logger.info("[sw] Opening window: %s", url)
        self.opened.append(url)


class OfflineCachePolicy:
    def __init__(
        self,
        fetcher,
        storage: Optional[CacheStorage] = None,
        static_cache_name: str = STATIC_CACHE_NAME,
        data_cache_name: str = DATA_CACHE_NAME,
    ):
        self.fetcher = fetcher
        self.storage = storage or CacheStorage()
        self.static_cache_name = static_cache_name
        self.data_cache_name = data_cache_name
        self.clients = Clients()
        self.state = WorkerState.PARSED
        self.skip_waiting = False
        self.notifications: List[Notification] = []

    async def _fetch(self, request: HttpRequest) -> HttpResponse:
        return await run_in_threadpool(self.fetcher.fetch, request)

    # Lifecycle

    async def install(self) -> None:
        """Cache the app shell. All shell URLs are stored or none are."""
        logger.info("[sw] Installing service worker...")
        self.state = WorkerState.INSTALLING
        fetched = []
        try:
            for url in SHELL_URLS:
                request = HttpRequest(url=url)
                response = await self._fetch(request)
                if not response.ok:
                    raise InstallError(f"{url} answered {response.status}")
                fetched.append((request, response))
        except (NetworkError, InstallError) as e:
            self.state = WorkerState.REDUNDANT
            logger.error("[sw] Install failed: %s", e)
            if isinstance(e, InstallError):
                raise
            raise InstallError(str(e)) from e

        logger.info("[sw] Caching static assets")
        store = self.storage.open(self.static_cache_name)
        for request, response in fetched:
            store.put(request, response)
        self.state = WorkerState.INSTALLED
        self.skip_waiting = True

    async def activate(self) -> List[str]:
        """Drop every cache store from an older generation and take control."""
        logger.info("[sw] Activating service worker...")
        self.state = WorkerState.ACTIVATING
        current = {self.static_cache_name, self.data_cache_name}
        deleted: List[str] = []
        for name in self.storage.keys():
            if name not in current:
                logger.info("[sw] Deleting old cache: %s", name)
                self.storage.delete(name)
                deleted.append(name)
        self.clients.claim()
        self.state = WorkerState.ACTIVATED
        return deleted

    # Fetch

    async def handle_fetch(self, request: HttpRequest) -> HttpResponse:
        if request.path.startswith(API_PREFIX):
            return await self._handle_api(request)
        return await self._handle_static(request)

    async def _handle_api(self, request: HttpRequest) -> HttpResponse:
        store = self.storage.open(self.data_cache_name)
        try:
            response = await self._fetch(request)
        except NetworkError:
            logger.info("[sw] Serving API data from cache: %s", request.path)
            cached = store.match(request)
            if cached is not None:
                return cached.with_header(SERVED_FROM_HEADER, "cache")
            return fallback_response(request.path)

        # Only GET exchanges are cacheable
        if response.ok and request.method.upper() == "GET":
            store.put(request, response)
        return response

    async def _handle_static(self, request: HttpRequest) -> HttpResponse:
        store = self.storage.open(self.static_cache_name)
        cached = store.match(request)
        if cached is not None:
            return cached

        try:
            response = await self._fetch(request)
        except NetworkError:
            if request.mode == "navigate":
                root = store.match(HttpRequest(url="/"))
                if root is not None:
                    return root
            return offline_response()

        if response.ok and request.method.upper() == "GET":
            store.put(request, response)
        return response

    # Background sync

    async def refresh_data(self) -> bool:
        """Re-fetch the inventory endpoint and overwrite its cache entry."""
        request = HttpRequest(url=PRIMARY_DATA_URL)
        try:
            response = await self._fetch(request)
        except NetworkError as e:
            logger.warning("[sw] Failed to sync inventory data: %s", e)
            return False
        if not response.ok:
            logger.warning("[sw] Failed to sync inventory data: upstream answered %s", response.status)
            return False
        self.storage.open(self.data_cache_name).put(request, response)
        logger.info("[sw] Inventory data synced successfully")
        return True

    async def sync(self, tag: str) -> bool:
        if tag != SYNC_TAG:
            return False
        logger.info("[sw] Background sync: Updating inventory data")
        return await self.refresh_data()

    async def periodic_sync(self, tag: str) -> bool:
        if tag != PERIODIC_SYNC_TAG:
            return False
        return await self.refresh_data()

    # Notifications

    def push(self, payload: Optional[str] = None) -> Notification:
        notification = Notification(
            title="Apna Thela",
            body=payload or "New update available!",
            icon="/icons/icon-192x192.png",
            badge="/icons/icon-72x72.png",
            tag="apna-thela-notification",
            actions=[NotificationAction(action="open", title="Open App")],
        )
        self.notifications.append(notification)
        return notification

    def notification_click(self, tag: Optional[str] = None, action: Optional[str] = None) -> Optional[str]:
        """Dismiss the notification; open the root page for "open" or a plain click."""
        self.notifications = [n for n in self.notifications if tag is None or n.tag != tag]
        if action in (None, "", "open"):
            self.clients.open_window("/")
            return "/"
        return None
