from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./hydration_platform.db"
    log_level: str = "INFO"

    # Coach text generation
    openai_api_key: str = ""
    coach_model: str = "gpt-4o-mini"

    # Body model defaults
    default_weight_kg: float = 70.0

    # Canonical per-kg-LBM nutrient rates (sessions may override)
    protein_rate_g_per_kg: float = 1.6
    sodium_rate_mg_per_kg: float = 25.0
    potassium_rate_mg_per_kg: float = 57.0


@lru_cache
def get_settings() -> Settings:
    return Settings()
