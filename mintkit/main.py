import logging
import time

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from mintkit.config import settings
from mintkit.routes.mint import router as mint_router
from mintkit.services.context import MintContext

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s | %(name)-20s | %(levelname)-7s | %(message)s",
)
logger = logging.getLogger("app")


class RequestTimingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} → {response.status_code} "
            f"({duration_ms:.1f}ms)"
        )
        return response


app = FastAPI(
    title="MintKit API",
    description=(
        "Detect the minting convention of EVM sale contracts, price and "
        "simulate mint transactions, and fire a mint when a sale opens."
    ),
    version="0.1.0",
)

app.add_middleware(RequestTimingMiddleware)

app.include_router(mint_router)


@app.on_event("startup")
async def startup():
    if getattr(app.state, "context", None) is None:
        app.state.context = MintContext.from_settings(settings)
    ctx = app.state.context
    logger.info(
        f"Ready: chain {ctx.chain_id}, {len(ctx.registry.platforms)} platform modules, "
        f"signer={'yes' if ctx.can_sign else 'no'}"
    )


@app.on_event("shutdown")
async def shutdown():
    ctx = getattr(app.state, "context", None)
    if ctx is not None:
        await ctx.close()
        app.state.context = None


@app.get("/health")
async def health():
    ctx = getattr(app.state, "context", None)
    return {
        "status": "ok",
        "chain_id": ctx.chain_id if ctx else settings.chain_id,
        "platforms": ctx.registry.platforms if ctx else [],
        "signer": bool(ctx and ctx.can_sign),
        "monitor": ctx.monitor.status()["state"] if ctx else "idle",
    }
