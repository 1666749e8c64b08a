import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from promotions.core.config import settings
from promotions.routers import discounts

logging.getLogger("promotions").setLevel(settings.LOG_LEVEL.upper())

OPENAPI_TAGS = [
    {
        "name": "Discounts",
        "description": "Manage coupons and automatic offers, their usage and metrics.",
    },
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "Admin API for the discount and promotion engine. "
        "Manage discount rules and targets, review usage per order, "
        "and report on savings given."
    ),
    debug=settings.DEBUG,
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(discounts.router, prefix="/v1/discounts", tags=["Discounts"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
    }
