"""FastAPI main application."""

import logging
from typing import List, Optional, Tuple

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import settings
from ..core.mountains import MountainInverter, MountainOptions

# Configure logging
logging.basicConfig(level=settings.log_level.upper(), format="%(message)s")

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Mountain Inversion API",
    description="Detects brightness mountains and reflects them about an inflection point",
    version="0.1.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class InversionRequest(BaseModel):
    """Image and parameters for a mountain inversion.

    Parameters left out fall back to the configured defaults.
    """

    field: List[List[float]] = Field(..., description="Brightness rows, top to bottom")
    inflection_point: Optional[float] = Field(None, description="Centre of the reflection")
    maxima_noise_tolerance: Optional[float] = Field(None, ge=0, description="Maxima prominence")
    exclude_edge_maxima: Optional[bool] = Field(None, description="Ignore maxima at the border")
    flood_tolerance: Optional[float] = Field(None, ge=0, description="Per-step flood slack")
    sanity_threshold: Optional[float] = Field(None, description="Forced-include ceiling")
    fill_holes: Optional[bool] = Field(None, description="Fill holes in the mask")

    def to_options(self) -> MountainOptions:
        defaults = MountainOptions.from_settings(settings)
        overrides = {
            name: value
            for name, value in self.dict(exclude={"field"}).items()
            if value is not None
        }
        return MountainOptions(**{**defaults.__dict__, **overrides})


class RegionSummary(BaseModel):
    """Statistics of the mountain region before inversion."""

    count: int
    mean: float
    min: float
    max: float


class InversionResponse(BaseModel):
    """Result of a mountain inversion."""

    width: int
    height: int
    maxima: List[Tuple[int, int]]
    mask: List[List[bool]]
    corrected: List[List[float]]
    offset: float
    region: RegionSummary


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Mountain Inversion API",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/mountains/invert", response_model=InversionResponse)
def invert_mountains(request: InversionRequest):
    """
    Detect mountains in the submitted field and reflect them about the inflection point.
    """
    try:
        options = request.to_options()
        result = MountainInverter(options).process(request.field)
    except ValueError as e:
        logger.warning("Inversion request rejected", error=str(e))
        raise HTTPException(status_code=422, detail=str(e))

    height, width = result.corrected.shape
    logger.info(
        "Inversion request complete",
        width=width,
        height=height,
        maxima=len(result.maxima),
        pixels=result.selection.count,
    )

    before = result.inversion.before
    return InversionResponse(
        width=width,
        height=height,
        maxima=result.maxima,
        mask=result.mask.values.tolist(),
        corrected=result.corrected.tolist(),
        offset=result.offset,
        region=RegionSummary(
            count=before.count, mean=before.mean, min=before.min, max=before.max
        ),
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
