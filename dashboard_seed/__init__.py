from fastapi import FastAPI, Request, status
from contextlib import asynccontextmanager

from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from dashboard_seed.seed.errors import SeedError
from dashboard_seed.seed.routes import seed_router
from dashboard_seed.utils.limiter import limiter
from dashboard_seed.utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # No pool to warm up: every seed request opens and closes its own connection
    logger.info("---Server Started---")
    yield
    logger.info("---Server Closed---")

app = FastAPI(
    title="Dashboard Seed API",
    description="Populates the demo dashboard database with placeholder data",
    lifespan = lifespan
)

# Required for SlowAPI to function correctly on routes
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

@app.get("/")
def health_check():
    return{
        "status": "Success",
        "message": "Server Working"
    }

@app.exception_handler(SeedError)
async def seed_error_handler(request: Request, exc: SeedError):
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": exc.message}
    )

app.include_router(seed_router)
