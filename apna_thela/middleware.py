import time
import json
import logging
import threading
from typing import Dict, Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from .config import LOG_LEVEL


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One JSON log line per request, including where the answer came from."""

    def __init__(self, app, logger=None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("apna_thela.access")
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(message)s"))
            self.logger.addHandler(handler)
            self.logger.setLevel(LOG_LEVEL)

    async def dispatch(self, request: Request, call_next):
        start = time.time()
        ip = (request.client.host if request.client else None) or ""
        status = 500
        served_from = None
        try:
            response: Response = await call_next(request)
            status = response.status_code
            served_from = response.headers.get("x-served-from")
        finally:
            log: Dict[str, Any] = {
                "ts": int(time.time() * 1000),
                "ip": ip,
                "method": request.method,
                "path": request.url.path,
                "status": status,
                "duration_ms": int((time.time() - start) * 1000),
            }
            if served_from:
                log["served_from"] = served_from
            self.logger.info(json.dumps(log))
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window request limit per client IP."""

    def __init__(self, app, max_requests: int = 60, window_seconds: int = 60):
        super().__init__(app)
        self.max_requests = int(max_requests)
        self.window = int(window_seconds)
        self.buckets: Dict[str, list] = {}
        self.lock = threading.Lock()

    async def dispatch(self, request: Request, call_next):
        ip = (request.client.host if request.client else "") or ""
        now = time.time()
        with self.lock:
            cutoff = now - self.window
            # forget clients whose whole bucket has aged out
            for stale in [k for k, b in self.buckets.items() if k != ip and (not b or b[-1] < cutoff)]:
                del self.buckets[stale]
            bucket = self.buckets.setdefault(ip, [])
            while bucket and bucket[0] < cutoff:
                bucket.pop(0)
            allowed = len(bucket) < self.max_requests
            if allowed:
                bucket.append(now)
        if not allowed:
            return JSONResponse({"error": "rate_limited"}, status_code=429)
        return await call_next(request)
