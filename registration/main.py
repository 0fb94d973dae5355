# registration/main.py
import os
import uuid
import logging

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import JSONResponse, RedirectResponse

from registration.core.config import settings

# Routers
from registration.routers import health, submit, form, storage

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("registration")

app = FastAPI(title=settings.SERVICE_NAME)

# ---------------- Session cookie ----------------
# chỉ dùng cho cờ confetti sau khi nộp thành công
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET,
    max_age=60 * 60,  # 1 giờ
    same_site="lax",
)

# ---------------- Correlation-ID ----------------
@app.middleware("http")
async def add_correlation_id(request: Request, call_next):
    cid = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
    request.state.correlation_id = cid
    resp = await call_next(request)
    resp.headers["X-Correlation-ID"] = cid
    return resp

# ---------------- Global exception handler ----------------
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    cid = getattr(request.state, "correlation_id", None)
    log.error(
        "Unhandled %s on %s (cid=%s)",
        type(exc).__name__, request.url.path, cid,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return JSONResponse(
        status_code=500,
        content={"status": "error", "message": "Something went wrong. Please try again."},
    )

# ---------------- Mount routers ----------------
app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(submit.router, prefix="/api", tags=["Submit"])
app.include_router(form.router)

# Storage Collaborator nội bộ (tắt khi dùng endpoint ngoài)
if settings.STORAGE_ENABLED:
    app.include_router(storage.router)

# ---------------- Startup ----------------
@app.on_event("startup")
def _log_routes():
    for r in app.routes:
        log.debug("ROUTE: %s %s", getattr(r, "path", r), getattr(r, "methods", ""))
    log.info("Relaying submissions to storage (internal store %s)", "on" if settings.STORAGE_ENABLED else "off")

# ---------------- Redirect "/" → form ----------------
@app.get("/", include_in_schema=False)
async def root():
    return RedirectResponse(url="/form", status_code=307)

# ---------------- Static web/ ----------------
BASE_DIR = os.path.abspath(os.path.dirname(__file__))
STATIC_DIR = os.path.join(BASE_DIR, "web", "static")
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
