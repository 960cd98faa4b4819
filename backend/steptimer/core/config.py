from functools import lru_cache
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Timer configuration loaded from environment variables."""

    tick_period: float = 1.0
    rewind_amount: int = 10
    fast_forward_amount: int = 10

    model_config = {
        "env_file": ".env",
        "env_prefix": "STEPTIMER_",
        "extra": "ignore",
    }

@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()
