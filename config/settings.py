from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Oracle freshness threshold used by the host adapter (seconds)
    ORACLE_MAX_AGE_SECONDS: int = 90

    # Defaults for newly opened markets (e6 / bps)
    DEFAULT_LIQUIDITY_B: int = 500_000_000
    DEFAULT_FEE_BPS: int = 25

    # App
    APP_NAME: str = "LMSR Binary Market"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev


settings = Settings()
