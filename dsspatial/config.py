"""Configuration and constants for the spatial DataSHIELD client.

Includes configuration for:
- Client behaviour (ClientSettings with DSSPATIAL_ prefix)
- Study servers to log in to (LoginConfig, loaded from a JSON login file)

Configuration can be overridden via:
1. Environment variables (e.g., DSSPATIAL_REQUEST_TIMEOUT_SECONDS=60)
2. .env file in the current directory
3. Default values in code
"""

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class WireConstants:
    """Fixed values of the Opal DataSHIELD REST protocol.

    These are NOT configurable - they are defined by the server.
    """

    API_PREFIX: str = "/ws"
    AUTH_SCHEME: str = "X-Opal-Auth"
    CONTENT_TYPE_RSCRIPT: str = "application/x-rscript"
    CONTENT_TYPE_TABLE: str = "application/x-opal-table"

    # Symbol a server's table is assigned to at login
    DEFAULT_SYMBOL: str = "D"


# Module-level singleton for wire constants
CONSTANTS = WireConstants()


class ClientSettings(BaseSettings):
    """Client behaviour configuration.

    Can be overridden via environment variables with DSSPATIAL_ prefix:
    - DSSPATIAL_LOGIN_FILE
    - DSSPATIAL_REQUEST_TIMEOUT_SECONDS
    - DSSPATIAL_VERIFY_TLS
    - DSSPATIAL_FAIL_ON_PARTIAL
    - DSSPATIAL_LOG_JSON

    Attributes:
        login_file: JSON file listing the study servers to connect to
        request_timeout_seconds: Timeout for each remote call
        verify_tls: Verify server TLS certificates
        fail_on_partial: Treat an operation that failed on some connections as an error
        log_json: Emit structured JSON logs instead of text
    """

    model_config = SettingsConfigDict(
        env_prefix="DSSPATIAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    login_file: Path | None = Field(
        default=None, description="JSON login file listing study servers"
    )
    request_timeout_seconds: float = Field(
        default=300.0, gt=0, description="Timeout for each remote call (seconds)"
    )
    verify_tls: bool = Field(default=True, description="Verify server TLS certificates")
    fail_on_partial: bool = Field(
        default=True,
        description="Raise when an operation did not create its output on every connection",
    )
    log_json: bool = Field(default=False, description="Structured JSON log output")


class ServerConfig(BaseModel):
    """One study server in a login file.

    Attributes:
        name: Connection name, unique within the login file
        url: Base URL of the Opal server
        user: Username
        password: Password
        table: Fully-qualified table ("project.table") assigned at login
        symbol: Workspace name the table is assigned to
        profile: Optional DataSHIELD profile
    """

    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    user: str
    password: SecretStr
    table: str | None = None
    symbol: str = CONSTANTS.DEFAULT_SYMBOL
    profile: str | None = None

    @field_validator("url")
    @classmethod
    def must_be_http(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            msg = "Server URL must start with http:// or https://"
            raise ValueError(msg)
        return v.rstrip("/")


class LoginConfig(BaseModel):
    """Ordered list of study servers. Connection order follows this list."""

    servers: list[ServerConfig] = Field(..., min_length=1)

    @field_validator("servers")
    @classmethod
    def names_must_be_unique(cls, v: list[ServerConfig]) -> list[ServerConfig]:
        names = [server.name for server in v]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            msg = f"Duplicate server names in login file: {', '.join(duplicates)}"
            raise ValueError(msg)
        return v

    @classmethod
    def from_file(cls, path: Path) -> "LoginConfig":
        """Load a login file.

        Example:
            {"servers": [{"name": "study1", "url": "https://opal.example.org",
                          "user": "analyst", "password": "...", "table": "SPATIAL.trips"}]}
        """
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))
