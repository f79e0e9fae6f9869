import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from .config import LOG_LEVEL, RATE_LIMIT_MAX, RATE_LIMIT_WINDOW, WEB_DIR
from .middleware import RequestLoggingMiddleware, RateLimitMiddleware
from .routes.catalog import router as catalog_router
from .routes.language import router as language_router
from .routes.vendors import router as vendors_router


logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s")

app = FastAPI(title="apna-thela")

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(RateLimitMiddleware, max_requests=RATE_LIMIT_MAX, window_seconds=RATE_LIMIT_WINDOW)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health():
    return {"status": "ok", "service": "apna-thela"}


# App shell, cached by the offline proxy on install
@app.get("/")
@app.get("/index.html")
def index():
    return FileResponse(WEB_DIR / "index.html", media_type="text/html")


@app.get("/manifest.json")
def manifest():
    return FileResponse(WEB_DIR / "manifest.json", media_type="application/manifest+json")


# Include routers with /api prefix
app.include_router(vendors_router, prefix="/api")
app.include_router(catalog_router, prefix="/api")
app.include_router(language_router, prefix="/api")
