"""Hekayaty order engine FastAPI application.

Checkout, fulfillment, payment verification and payouts over HTTP. The
identity gateway in front of this service authenticates callers and passes
them on as ``X-User-Id`` / ``X-User-Role`` headers.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.domain import hekayaty, init_domain
from shared.http import register_exception_handlers

init_domain()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Hekayaty Orders API",
    description="Marketplace order orchestration, fulfillment and payouts",
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
    """Push the Protean domain context for each request."""
    with hekayaty.domain_context():
        response = await call_next(request)
    return response


register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from catalogue.api import seller_admin_router  # noqa: E402
from earnings.api import earnings_router, payout_admin_router, payout_router  # noqa: E402
from fulfillment.api import fulfillment_router  # noqa: E402
from notifications.api import notification_router  # noqa: E402
from ordering.api import admin_order_router, cart_router, order_router  # noqa: E402
from shipping.api import shipping_router  # noqa: E402

app.include_router(cart_router)
app.include_router(order_router)
app.include_router(admin_order_router)
app.include_router(shipping_router)
app.include_router(fulfillment_router)
app.include_router(earnings_router)
app.include_router(payout_router)
app.include_router(payout_admin_router)
app.include_router(seller_admin_router)
app.include_router(notification_router)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": hekayaty.name, "env": hekayaty.config.get("env")})
