"""Storefront FastAPI application.

Web server that processes commands synchronously via HTTP. Each request is
wrapped in the storefront domain context, so every command runs in its own
unit of work.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.delivery import reset_scheduler
from storefront.delivery.firing import process_due_deliveries
from storefront.domain import storefront
from storefront.utils.logging import add_context, clear_context, get_logger

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV controls which config overlay is applied:
#   - unset / "test" → in-memory stores
#   - "production"   → PostgreSQL via DATABASE_URL
storefront.init()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Deliveries whose timers died with the previous process
    with storefront.domain_context():
        outcomes = process_due_deliveries()
    logger.info("Startup delivery sweep finished", **outcomes)
    yield
    reset_scheduler()


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Wandshop Storefront API",
    description="Wand inventory, quiz-driven allocation and the order lifecycle",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context for each request."""
    add_context(request_id=request.headers.get("x-request-id", uuid4().hex), path=request.url.path)
    try:
        with storefront.domain_context():
            response = await call_next(request)
        return response
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from storefront.api.errors import register_exception_handlers  # noqa: E402
from storefront.api.routes import answer_router, order_router, wand_router, wizard_router  # noqa: E402

app.include_router(wizard_router)
app.include_router(wand_router)
app.include_router(answer_router)
app.include_router(order_router)
register_exception_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": storefront.name})
