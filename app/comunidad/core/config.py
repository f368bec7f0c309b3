from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    APP_NAME: str = "CET-COMUNIDAD"
    DATABASE_URL: str = "sqlite+pysqlite:///./comunidad.db"
    AUTH_JWT_SECRET: str = "change-me"
    AUTH_JWT_ALGORITHM: str = "HS256"
    AUTH_JWT_AUDIENCE: str = "authenticated"
    ADMIN_ROLE: str = "admin"
    LOGIN_PATH: str = "/login"
    DATATABLE_DEFAULT_PAGE_SIZE: int = 10
    DATATABLE_PAGE_SIZES: list[int] = [10, 25, 50, 100]
    PUBLIC_PAGE_SIZE: int = 12
    METRICS_ENABLED: bool = True
    LOG_LEVEL: str = "INFO"

settings = Settings()
