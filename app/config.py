from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "postgresql+psycopg2://postgres:postgres@db:5432/recipes"

    # API mount point (the browser client talks to /api/...)
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:3000"]

    log_level: str = "INFO"

    # Auth settings
    session_cookie_name: str = "recipe_box_session"
    session_max_age: int = 86400 * 7  # 7 days
    password_min_length: int = 6

    model_config = SettingsConfigDict(env_file=".env")


settings = Settings()
