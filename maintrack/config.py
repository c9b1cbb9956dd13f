from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./data/maintrack.sqlite3"
    api_key: str = ""  # empty = no auth check (local dev)
    cors_origins: list[str] = ["http://localhost:8000", "http://localhost:5173"]
    seed_demo_user: bool = True
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "MAINTRACK_"}


settings = Settings()
