"""Configuration management for the Tauros client."""

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tauros.exchange.auth import Credentials


# Load .env from project root (when developing) or cwd (when installed)
def _load_env_files() -> None:
    cwd = Path.cwd()
    project_root = Path(__file__).resolve().parent.parent
    for base in (cwd, project_root):
        env_default = base / ".env.default"
        env_file = base / ".env"
        if env_default.exists():
            load_dotenv(env_default)
        if env_file.exists():
            load_dotenv(env_file)
            break


_load_env_files()


class Config(BaseSettings):
    """Client configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_ignore_case=True,
    )

    tauros_api_key: str = Field(default="")
    tauros_api_secret: str = Field(default="")
    tauros_base_url: str = Field(default="https://api.tauros.io")

    request_timeout: float = Field(default=3.0, gt=0)

    def validate(self) -> list[str]:
        """Validate configuration and return list of error messages."""
        errors = []
        if not self.tauros_api_key:
            errors.append("TAUROS_API_KEY is required for authenticated endpoints")
        if not self.tauros_api_secret:
            errors.append("TAUROS_API_SECRET is required for authenticated endpoints")
        return errors

    def credentials(self) -> Credentials | None:
        """Decoded credentials, or None when neither key nor secret is set.

        Raises ConfigurationError when only one is set or the secret is not
        valid base64.
        """
        if not self.tauros_api_key and not self.tauros_api_secret:
            return None
        return Credentials(self.tauros_api_key, self.tauros_api_secret)
