"""Client and application configuration."""

import tomllib
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

DEFAULT_BASE_URL = "https://phonetworks.com:1338/"
DEFAULT_DATA_DIR = Path.home() / ".local" / "graphjs"

# Keys accepted from config.toml, with the type each must have
_TOML_KEYS: dict[str, type | tuple[type, ...]] = {
    "public_id": str,
    "base_url": str,
    "request_timeout": (int, float),
    "debug_logging": bool,
}


class ClientConfig(BaseModel):
    """Settings for one client instance, validated at construction."""

    model_config = ConfigDict(frozen=True)

    public_id: str = Field(min_length=1, description="Public identifier of the application on the service")
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Service endpoint; operations are appended as path segments")
    request_timeout: float = Field(default=20.0, gt=0, description="Timeout in seconds applied to every request")
    debug_logging: bool = Field(default=False, description="Log full request URLs and response bodies at DEBUG level")

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        parts = urlsplit(value)
        if parts.scheme not in ("http", "https") or not parts.hostname:
            msg = f"base_url must be an absolute http(s) URL, got {value!r}"
            raise ValueError(msg)
        return value

    @computed_field(description="Service host the session cookies are scoped to")
    @property
    def host(self) -> str:
        """Service host the session cookies are scoped to."""
        return urlsplit(self.base_url).hostname or ""

    @computed_field(description="Public id with dashes removed, used in cookie names")
    @property
    def cookie_key(self) -> str:
        """Public id with dashes removed, used in cookie names."""
        return self.public_id.replace("-", "")

    @computed_field(description="Name of the identity cookie")
    @property
    def identity_cookie_name(self) -> str:
        """Name of the identity cookie."""
        return f"graphjs_{self.cookie_key}_id"

    @computed_field(description="Name of the explicit logout marker cookie")
    @property
    def session_off_cookie_name(self) -> str:
        """Name of the explicit logout marker cookie."""
        return f"graphjs_{self.cookie_key}_session_off"


class Config(BaseModel):
    """Command line application configuration."""

    model_config = ConfigDict(frozen=True)

    data_dir: Path = Field(description="Base directory for session, config and log files")
    client: ClientConfig = Field(description="Settings passed to the client")

    @computed_field(description="Optional TOML configuration file")
    @property
    def config_path(self) -> Path:
        """Optional TOML configuration file."""
        return self.data_dir / "config.toml"

    @computed_field(description="Persisted session cookies")
    @property
    def session_path(self) -> Path:
        """Persisted session cookies."""
        return self.data_dir / "session.json"

    @computed_field(description="Log file")
    @property
    def log_path(self) -> Path:
        """Log file."""
        return self.data_dir / "graphjs.log"

    @staticmethod
    def build(data_dir: Path | None = None, **overrides: Any) -> "Config":
        """Build a Config from defaults, optional config.toml, and command line overrides.

        Overrides whose value is None are ignored.

        Raises:
            pydantic.ValidationError: Resulting client settings are invalid (e.g. no public_id).

        """
        resolved_dir = data_dir if data_dir is not None else DEFAULT_DATA_DIR
        config_path = resolved_dir / "config.toml"

        kwargs: dict[str, Any] = {}
        if config_path.is_file():
            with config_path.open("rb") as f:
                toml_data = tomllib.load(f)
            for key, expected in _TOML_KEYS.items():
                if isinstance(toml_data.get(key), expected):
                    kwargs[key] = toml_data[key]
        kwargs.update({k: v for k, v in overrides.items() if v is not None})

        return Config(data_dir=resolved_dir, client=ClientConfig(**kwargs))
