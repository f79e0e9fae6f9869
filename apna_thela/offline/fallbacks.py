import json
from types import MappingProxyType

from .models import HttpResponse


API_PREFIX = "/api/"

SHELL_URLS = ("/", "/index.html", "/manifest.json")

# Refreshed by background sync
PRIMARY_DATA_URL = "/api/inventory"

SYNC_TAG = "background-sync-inventory"
PERIODIC_SYNC_TAG = "content-sync"

SERVED_FROM_HEADER = "X-Served-From"

# Served only when both the network and the data cache fail for a known path
FALLBACK_PAYLOADS = MappingProxyType({
    "/api/inventory": json.dumps([
        {
            "id": "offline-1",
            "name": "Cached Inventory Item",
            "quantity": 0,
            "unit": "kg",
            "category": "vegetables",
            "lowStockThreshold": 5,
            "isOffline": True,
        }
    ]),
    "/api/inventory/low-stock": json.dumps([]),
    "/api/suppliers": json.dumps([
        {
            "id": "offline-supplier",
            "name": "Offline Mode - Check Connection",
            "category": "vegetables",
            "city": "Delhi",
            "phone": "",
            "isOffline": True,
        }
    ]),
    "/api/suppliers/categories": json.dumps(["vegetables", "spices", "oil", "dairy", "meat"]),
})

OFFLINE_ERROR_PAYLOAD = json.dumps({"error": "Offline", "message": "No cached data available"})


def fallback_response(path: str) -> HttpResponse:
    body = FALLBACK_PAYLOADS.get(path, OFFLINE_ERROR_PAYLOAD)
    return HttpResponse(
        status=200,
        status_text="OK",
        headers={"Content-Type": "application/json", SERVED_FROM_HEADER: "fallback"},
        body=body.encode("utf-8"),
    )


def offline_response() -> HttpResponse:
    return HttpResponse(
        status=503,
        status_text="Service Unavailable",
        headers={"Content-Type": "text/plain; charset=utf-8"},
        body=b"Offline",
    )
