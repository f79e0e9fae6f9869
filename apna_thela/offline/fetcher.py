from typing import Optional
from urllib.parse import urljoin

import requests

from .models import HttpRequest, HttpResponse


# requests already decodes the body, and the proxy sets its own framing
_DROP_RESPONSE_HEADERS = {
    "connection",
    "content-encoding",
    "content-length",
    "keep-alive",
    "transfer-encoding",
}
_DROP_REQUEST_HEADERS = {"host", "connection", "content-length", "accept-encoding"}


class NetworkError(Exception):
    """The upstream could not be reached or the exchange broke off."""


class RequestsFetcher:
    """Blocking upstream client; the policy runs it in the threadpool.

    No timeout is applied unless one is passed in.
    """

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self.base_url = base_url.rstrip("/") + "/"
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch(self, request: HttpRequest) -> HttpResponse:
        url = urljoin(self.base_url, request.url.lstrip("/"))
        headers = {k: v for k, v in request.headers.items() if k.lower() not in _DROP_REQUEST_HEADERS}
        try:
            resp = self.session.request(
                request.method,
                url,
                headers=headers,
                data=request.body or None,
                timeout=self.timeout,
                allow_redirects=False,
            )
        except requests.RequestException as e:
            raise NetworkError(f"{request.method} {url}: {e}") from e
        return HttpResponse(
            status=resp.status_code,
            status_text=resp.reason or "",
            headers={k: v for k, v in resp.headers.items() if k.lower() not in _DROP_RESPONSE_HEADERS},
            body=resp.content,
        )

    def close(self) -> None:
        self.session.close()
