"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Mountain detection defaults
    inflection_point: float = Field(
        default=128.0, description="Brightness value the mountains are reflected about"
    )
    maxima_noise_tolerance: float = Field(
        default=10.0, ge=0, description="Prominence a peak needs to count as a maximum"
    )
    exclude_edge_maxima: bool = Field(
        default=True, description="Drop maxima whose tolerance region touches the border"
    )
    flood_tolerance: float = Field(
        default=5.0, ge=0, description="Brightness increase allowed per flood step"
    )
    sanity_threshold: float = Field(
        default=250.0, description="Pixels brighter than this are forced into a run"
    )
    fill_holes: bool = Field(default=True, description="Fill holes in the mountain mask")
    inversion_floor: float = Field(
        default=0.0, description="Floor the raw inversion re-bases its minimum to"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain, json)")

    class Config:
        env_prefix = "MOUNTAINS_"
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
