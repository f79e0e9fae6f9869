import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import Response
from pydantic import BaseModel

from ..config import RATE_LIMIT_MAX, RATE_LIMIT_WINDOW, UPSTREAM_URL
from ..middleware import RateLimitMiddleware, RequestLoggingMiddleware
from .fetcher import RequestsFetcher
from .models import HttpRequest, Notification
from .policy import InstallError, OfflineCachePolicy


logger = logging.getLogger(__name__)

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class SyncEvent(BaseModel):
    tag: str


class PushEvent(BaseModel):
    data: Optional[str] = None


class NotificationClickEvent(BaseModel):
    tag: Optional[str] = None
    action: Optional[str] = None


def _is_navigation(request: Request) -> bool:
    if request.headers.get("sec-fetch-mode") == "navigate":
        return True
    return request.method == "GET" and "text/html" in request.headers.get("accept", "")


def create_proxy_app(policy: Optional[OfflineCachePolicy] = None) -> FastAPI:
    """Build the offline proxy that fronts the upstream app.

    Every request not under ``/__sw`` goes through the cache policy.
    """
    if policy is None:
        policy = OfflineCachePolicy(RequestsFetcher(UPSTREAM_URL))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            await policy.install()
            await policy.activate()
        except InstallError as e:
            # the proxy keeps forwarding; only the shell stays uncached
            logger.error("[sw] Running without an app shell cache: %s", e)
        yield
        close = getattr(policy.fetcher, "close", None)
        if close is not None:
            close()

    app = FastAPI(title="apna-thela-offline-proxy", lifespan=lifespan)
    app.state.policy = policy
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RateLimitMiddleware, max_requests=RATE_LIMIT_MAX, window_seconds=RATE_LIMIT_WINDOW)

    @app.get("/__sw/state")
    def worker_state():
        return {
            "state": policy.state.value,
            "caches": policy.storage.keys(),
            "controlling": policy.clients.claimed,
        }

    @app.post("/__sw/sync")
    async def background_sync(event: SyncEvent):
        return {"tag": event.tag, "synced": await policy.sync(event.tag)}

    @app.post("/__sw/periodic-sync")
    async def periodic_sync(event: SyncEvent):
        return {"tag": event.tag, "synced": await policy.periodic_sync(event.tag)}

    @app.post("/__sw/push", response_model=Notification)
    def push(event: PushEvent):
        return policy.push(event.data)

    @app.post("/__sw/notification-click")
    def notification_click(event: NotificationClickEvent):
        return {"opened": policy.notification_click(event.tag, event.action)}

    @app.api_route("/{full_path:path}", methods=PROXY_METHODS)
    async def intercept(full_path: str, request: Request):
        url = request.url.path
        if request.url.query:
            url += "?" + request.url.query
        outgoing = HttpRequest(
            method=request.method,
            url=url,
            headers=dict(request.headers),
            body=await request.body(),
            mode="navigate" if _is_navigation(request) else "cors",
        )
        result = await policy.handle_fetch(outgoing)
        return Response(content=result.body, status_code=result.status, headers=result.headers)

    return app


def main() -> None:
    import os

    import uvicorn

    uvicorn.run(
        create_proxy_app(),
        host=os.getenv("PROXY_HOST", "127.0.0.1"),
        port=int(os.getenv("PROXY_PORT", "8080")),
    )


if __name__ == "__main__":
    main()
