from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from api.admin_routes import router as admin_router
from api.emissions_routes import router as emissions_router
from api.status import router as status_router
from api.users_routes import router as users_router
from config import configure_logging, get_settings
from core.exceptions import StoreUnavailableError
from models.transit import ApiLogRecord
from services.storage.store_factory import make_store
from contextlib import asynccontextmanager
import logging
import time

configure_logging()
log = logging.getLogger("transit_footprint")

# Requests under these prefixes are recorded in the store's request log
LOGGED_PREFIXES = ("/users", "/health")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    store = make_store(settings)
    if settings.DEMO_USER and settings.DEMO_API_KEY:
        store.set_api_key(settings.DEMO_USER, settings.DEMO_API_KEY, "demo")
    app.state.settings = settings
    app.state.store = store
    yield


app = FastAPI(title="Transit Footprint API", lifespan=lifespan)

# CORS (adjust for your frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def record_request(request: Request, call_next):
    start = time.time()
    t0 = time.perf_counter()
    response = await call_next(request)
    if request.url.path.startswith(LOGGED_PREFIXES):
        rec = ApiLogRecord(
            ts=int(start),
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=(time.perf_counter() - t0) * 1000.0,
            client_ip=request.client.host if request.client else "unknown",
            user_id=getattr(request.state, "user_id", ""),
        )
        store = getattr(request.app.state, "store", None)
        if store is not None:
            try:
                await run_in_threadpool(store.append_log, rec)
            except StoreUnavailableError as e:
                # the response is already built; keep it
                log.warning("Request log not recorded: %s", e)
    return response


@app.exception_handler(StoreUnavailableError)
async def store_unavailable(request: Request, exc: StoreUnavailableError):
    log.error("Store unavailable: %s", exc)
    return JSONResponse(status_code=503, content={"detail": "Database unavailable"})


# Register API routes
app.include_router(status_router)
app.include_router(users_router)
app.include_router(emissions_router)
app.include_router(admin_router)

if __name__ == "__main__":
    import os
    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8080")),
        reload=True,
    )
