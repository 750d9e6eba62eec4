"""Configuration management for the Boundary Insights ingestion system."""

from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Load environment from .env if present
load_dotenv(override=False)


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    database_url: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")
    host: str = Field(default="localhost", validation_alias="DB_HOST")
    port: int = Field(default=3306, validation_alias="DB_PORT")
    name: str = Field(default="boundary_insights", validation_alias="DB_NAME")
    user: str = Field(default="boundary_user", validation_alias="DB_USER")
    password: str = Field(default="", validation_alias="DB_PASSWORD")
    echo: bool = Field(default=False, validation_alias="DB_ECHO")

    @property
    def url(self) -> str:
        """Get database URL for SQLAlchemy."""
        if self.database_url:
            return self.database_url
        return f"mysql+mysqlconnector://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"


class ImportSettings(BaseSettings):
    """Data import configuration settings."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    data_root: str = Field(default="data/ipl", validation_alias="IMPORT_DATA_ROOT")
    season_label_prefix: str = Field(default="IPL", validation_alias="SEASON_LABEL_PREFIX")


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    file: Optional[str] = Field(default=None, validation_alias="LOG_FILE")


class Settings(BaseModel):
    """Main application settings."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    importer: ImportSettings = Field(default_factory=ImportSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Global settings instance
settings = Settings()
