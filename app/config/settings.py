"""Typed runtime settings with dotenv support and startup validation."""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for webhook runtime and deployment configuration.

    Environment variable names map directly to field names in uppercase.
    Example: `deploy_token` reads from `DEPLOY_TOKEN`.

    Attributes:
        environment_name: Runtime environment label.
        host: Host interface for web server binding.
        port: Web server port.
        log_level: Root logging level name.
        deploy_token: Shared secret callers must send in the `Authorization` header.
        github_token: Access token used for manifest downloads and registry login.
        source_base_url: Raw file host serving application repositories.
        source_owner: Repository owner segment of the source URL.
        source_branch: Branch segment of the source URL.
        manifest_file_name: Primary compose manifest fetched for every deployment.
        registry_host: Container registry authenticated before redeploy.
        registry_username: Username presented to the container registry.
        working_directory: Directory receiving fetched files and running compose commands.
        fetch_timeout_seconds: Timeout applied to each artifact download.
        command_timeout_seconds: Timeout applied to each external command.
        prune_enabled: Whether dangling images are pruned after a successful redeploy.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )

    environment_name: str = Field(default="development")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=9090, ge=1, le=65535)
    log_level: str = Field(default="INFO")
    deploy_token: str = Field(min_length=1)
    github_token: str = Field(min_length=1)
    source_base_url: str = Field(default="https://raw.githubusercontent.com", min_length=1)
    source_owner: str = Field(default="nielshoek", min_length=1)
    source_branch: str = Field(default="main", min_length=1)
    manifest_file_name: str = Field(default="docker-compose.yml", min_length=1)
    registry_host: str = Field(default="ghcr.io", min_length=1)
    registry_username: str = Field(default="nielshoek", min_length=1)
    working_directory: str = Field(default=".")
    fetch_timeout_seconds: float = Field(default=30.0, gt=0)
    command_timeout_seconds: float = Field(default=600.0, gt=0)
    prune_enabled: bool = Field(default=True)

    @field_validator(
        "deploy_token",
        "github_token",
        "source_owner",
        "source_branch",
        "manifest_file_name",
        "registry_host",
        "registry_username",
    )
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("source_base_url")
    @classmethod
    def _validate_source_base_url(cls, value: str) -> str:
        normalized_value = value.strip().rstrip("/")
        if not normalized_value.startswith(("http://", "https://")):
            raise ValueError("source_base_url must be an http(s) URL")
        return normalized_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError("log_level must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG")
        return normalized_value


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
