"""Application configuration using Pydantic settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.constants import DEFAULT_MAX_PLAYERS, ROOM_CODE_LENGTH


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3001, description="Server port")
    environment: str = Field(default="development", description="Environment")
    frontend_url: str = Field(default="*", description="Allowed CORS origin")

    # Room Configuration
    room_code_length: int = Field(default=ROOM_CODE_LENGTH, ge=4, description="Room code length")
    default_max_players: int = Field(
        default=DEFAULT_MAX_PLAYERS, description="Room capacity when the client sends none"
    )

    @property
    def allowed_origins(self) -> list[str]:
        """Build the CORS origin list from the configured frontend URL."""
        return [origin.strip() for origin in self.frontend_url.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
