from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Magolla Farm API"
    currency: str = "KES"
    # When false the store starts empty instead of loading the mock dataset.
    seed_mock_data: bool = True
    # Comma-separated origins for CORS.
    cors_allow_origins: str = "*"
    log_level: str = "INFO"

    default_egg_price: int = 360  # KES per crate
    default_broiler_price: int = 820  # KES per bird
    pending_due_days: int = 7
    metrics_window_days: int = 30
    recent_expenses_limit: int = 10

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
