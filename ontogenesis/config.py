"""Evolution configuration — loaded from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class OntogenesisSettings(BaseSettings):
    generation_interval: float = Field(default=300.0, gt=0)  # seconds between ticks
    population_capacity: int = Field(default=50, ge=1)  # split across kernel types
    base_mutation_rate: float = Field(default=0.1, ge=0, le=1)
    selection_pressure: float = Field(default=0.5, ge=0, le=1)
    elitism_rate: float = Field(default=0.1, ge=0, le=1)  # top fraction kept as breeding stock
    crossover_rate: float = Field(default=0.7, ge=0, le=1)
    enable_emergence: bool = True
    archive_threshold: float = Field(default=0.3, ge=0, le=1)

    founders_per_population: int = Field(default=5, ge=0)
    emergence_log_limit: int = Field(default=100, ge=1)
    event_history_limit: int = Field(default=500, ge=0)
    seed: int | None = None
    log_level: str = "INFO"

    model_config = {"env_prefix": "ONTOGENESIS_", "frozen": True}
