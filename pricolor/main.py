"""
Pricolor HTTP service.
"""
from fastapi import FastAPI

from pricolor import __version__
from pricolor.api.v1 import router as v1_router
from pricolor.schemas import HealthResponse
from pricolor.utils.logging import get_logger

get_logger()

app = FastAPI(
    title="Pricolor Primary Color Picker",
    description="Pick the primary chromatic color of an image",
    version=__version__
)

app.include_router(v1_router)


@app.get("/healthz", response_model=HealthResponse)
async def healthz() -> HealthResponse:
    return HealthResponse(ok=True, version=__version__)
