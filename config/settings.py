from pydantic_settings import BaseSettings, SettingsConfigDict


# -----------------------------------------------------------------------------
# Settings
# -----------------------------------------------------------------------------
class Settings(BaseSettings):
    """
    Application settings managed by Pydantic.
    Reads from environment variables and/or .env file.
    """
    # Project Info
    PROJECT_NAME: str = "LorArch API"
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"

    ALLOWED_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # Database
    DATABASE_URL: str
    DATABASE_ECHO: bool = False

    # JWT (tokens are issued elsewhere; we only validate them)
    JWT_SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: str = "LorArchApi"
    JWT_AUDIENCE: str = "LorArchApiUsers"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Config to read from .env file if available
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
        )

settings = Settings() # type: ignore
