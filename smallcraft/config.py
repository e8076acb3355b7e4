from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SMALLCRAFT_", env_file=".env", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./smallcraft.db"
    # None means the bundled smallcraft/data/initial_smallcraft.json
    initial_data_path: str | None = None
    load_initial_data: bool = True
    cors_origins: list[str] = ["http://localhost:8000", "http://127.0.0.1:8000"]
    log_level: str = "INFO"


settings = Settings()
