"""Seed API route.

GET /seed wipes the demo tables and refills them with placeholder data.
"""

from fastapi import APIRouter, Depends, Request, Response, status
from dashboard_seed.config import Config, SeedConfig
from dashboard_seed.db.main import DatabaseFactory, open_database
from dashboard_seed.seed.schemas import SeedErrorResponse, SeedResponse
from dashboard_seed.seed.services import SeedServices
from dashboard_seed.utils.limiter import limiter


seed_router = APIRouter(prefix="/seed", tags=["Seed"])


def get_seed_config() -> SeedConfig:
    return Config.seed_config()


def get_database_factory() -> DatabaseFactory:
    return open_database


@seed_router.get(
    "",
    response_model=SeedResponse,
    status_code=status.HTTP_200_OK,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": SeedErrorResponse}},
)
@limiter.limit(Config.SEED_RATE_LIMIT)
async def seed_database(
    request: Request,
    response: Response,
    config: SeedConfig = Depends(get_seed_config),
    database_factory: DatabaseFactory = Depends(get_database_factory),
):
    # Failures surface as SeedError and are rendered by the app's handler
    seed_services = SeedServices(config, database_factory)
    result = await seed_services.run()

    return {"message": result.message}
