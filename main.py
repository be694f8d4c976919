import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI

import config
from gateway import BackendGateway

# Routers
from routers.catalog import router as catalog_router
from routers.health import router as health_router
from routers.problem import router as problem_router
from session import Session

logger = logging.getLogger("word-problems")
logging.basicConfig(level=getattr(logging, config.LOG_LEVEL, logging.INFO))
# request lines from the gateway client are noise at INFO
logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    gateway = BackendGateway()
    session = Session(gateway)
    app.state.session = session
    logger.info("Session %s talking to %s", session.user_id, gateway.base_url)
    # Serve right away; the catalog shows its loading state until this finishes
    load_task = asyncio.create_task(session.load())
    try:
        yield
    finally:
        if not load_task.done():
            load_task.cancel()
        with suppress(asyncio.CancelledError):
            await load_task
        app.state.session = None
        await gateway.aclose()


app = FastAPI(title="Word Problems – Quiz Client", lifespan=lifespan)

app.include_router(catalog_router)  # /, /state, /problems/{id}/select, /retry, /notice/dismiss
app.include_router(problem_router)  # /answer, /submit, /explain, /back
app.include_router(health_router)  # /health
