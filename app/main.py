import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.class_fee_structures.router import router as class_fee_structures_router
from app.api.v1.discount_categories.router import router as discount_categories_router
from app.api.v1.fee_heads.router import router as fee_heads_router
from app.api.v1.fees.router import router as fees_router
from app.api.v1.late_fee_rule.router import router as late_fee_rule_router
from app.api.v1.reports.router import router as reports_router
from app.api.v1.students.router import router as students_router
from app.api.v1.transport_routes.router import router as transport_routes_router
from app.core.config import settings
from app.db.session import create_tables

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    logger.info("Database ready at %s", settings.database_url.split("@")[-1])
    yield


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = FastAPI(title=settings.app_title, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(fee_heads_router)
    app.include_router(class_fee_structures_router)
    app.include_router(discount_categories_router)
    app.include_router(transport_routes_router)
    app.include_router(late_fee_rule_router)
    app.include_router(students_router)
    app.include_router(fees_router)
    app.include_router(reports_router)

    return app


app = create_app()
