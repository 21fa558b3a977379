
from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Library configuration loaded from environment variables / .env file."""

    app_env: str = Field(default="development", alias="APP_ENV")

    # Database (any SQLAlchemy URL; SQLite for local dev)
    database_url: str = Field(
        default="sqlite:///./ormwrap.db",
        alias="DATABASE_URL",
    )
    db_echo: bool = Field(default=False, alias="DB_ECHO")
    default_connection: str = Field(default="default", alias="DEFAULT_CONNECTION")

    # Primary key column used when a model does not declare its own
    id_column: str = Field(default="id", alias="ID_COLUMN")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
        "extra": "ignore",
    }

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

settings = Settings()
