from enum import Enum
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlsplit

from pydantic import BaseModel


class WorkerState(str, Enum):
    PARSED = "parsed"
    INSTALLING = "installing"
    INSTALLED = "installed"
    ACTIVATING = "activating"
    ACTIVATED = "activated"
    REDUNDANT = "redundant"


class HttpRequest(BaseModel):
    method: str = "GET"
    url: str  # path plus optional query, e.g. "/api/inventory?x=1"
    headers: Dict[str, str] = {}
    body: bytes = b""
    # "navigate" for full-page loads, "cors"/"no-cors" otherwise
    mode: str = "cors"

    @property
    def path(self) -> str:
        return urlsplit(self.url).path or "/"

    @property
    def cache_key(self) -> Tuple[str, str]:
        return (self.method.upper(), self.url)


class HttpResponse(BaseModel):
    status: int = 200
    status_text: str = "OK"
    headers: Dict[str, str] = {}
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def clone(self) -> "HttpResponse":
        return self.model_copy(deep=True)

    def with_header(self, name: str, value: str) -> "HttpResponse":
        copy = self.clone()
        headers = {k: v for k, v in copy.headers.items() if k.lower() != name.lower()}
        headers[name] = value
        copy.headers = headers
        return copy


class NotificationAction(BaseModel):
    action: str
    title: str


class Notification(BaseModel):
    title: str
    body: str
    icon: Optional[str] = None
    badge: Optional[str] = None
    tag: Optional[str] = None
    actions: List[NotificationAction] = []
