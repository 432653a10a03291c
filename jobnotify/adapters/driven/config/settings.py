"""Configuration loading from environment variables and files."""

import json
import logging
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from jobnotify.adapters.driven.formats.payload_format import Format
from jobnotify.adapters.driven.transports.http import MAX_REDIRECTS
from jobnotify.adapters.driven.transports.registry import build_transports
from jobnotify.core.endpoint import MAX_PORT
from jobnotify.ports.job_state import JobState
from jobnotify.ports.transport import ProxyConfig, TransportKind

__all__ = ["Settings", "load_settings", "DEFAULT_TIMEOUT_MS"]

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30_000


class Settings(BaseModel):
    """Runtime configuration for one notification.

    Attributes:
        protocol: Transport used to deliver the notification.
        endpoint: Destination string, in the transport's address format.
        format: Payload format (also selects the HTTP Content-Type).
        timeout_ms: Connect/read timeout per attempt in milliseconds.
        max_redirects: HTTP 307 hops followed before giving up.
        proxy_host: Explicitly configured HTTP proxy host.
        proxy_port: Explicitly configured HTTP proxy port.
        job_state_file_path: Path to the JSON file holding the job state.
    """

    protocol: TransportKind = Field(..., description="Transport: UDP, TCP or HTTP.")
    endpoint: str = Field(..., description="Where the notification is delivered.")
    format: Format = Field(default=Format.JSON, description="Payload format: JSON or XML.")
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0, description="Timeout in ms.")
    max_redirects: int = Field(default=MAX_REDIRECTS, ge=0, description="HTTP redirect hops.")
    proxy_host: str | None = Field(
        default=None,
        description="Optional HTTP proxy host. Overrides the http_proxy environment variable.",
    )
    proxy_port: int = Field(default=80, ge=0, le=MAX_PORT, description="HTTP proxy port.")
    job_state_file_path: str = Field(..., description="Path to JSON file with the job state.")

    @field_validator("protocol", mode="before")
    @classmethod
    def parse_protocol(cls, v: object) -> object:
        """Accept transport names in any case."""
        if isinstance(v, str):
            return TransportKind.from_name(v)
        return v

    @field_validator("format", mode="before")
    @classmethod
    def parse_format(cls, v: object) -> object:
        """Accept format names in any case."""
        if isinstance(v, str):
            return Format.from_name(v)
        return v

    @model_validator(mode="after")
    def validate_endpoint(self) -> "Settings":
        """Validate the endpoint against the chosen transport's grammar.

        Raises:
            ValueError: If the endpoint is malformed for the transport.
        """
        build_transports()[self.protocol].validate(self.endpoint)
        return self

    @property
    def proxy(self) -> ProxyConfig | None:
        """Explicit proxy configuration, None when not configured."""
        if not self.proxy_host:
            return None
        return ProxyConfig(host=self.proxy_host, port=self.proxy_port)

    def load_job_state(self) -> JobState:
        """Load and validate the job state from its JSON file.

        Returns:
            Parsed job state.

        Raises:
            ValueError: If file not found, invalid JSON, or not a job state.
        """
        try:
            with open(self.job_state_file_path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ValueError(f"Job state file not found: {self.job_state_file_path}") from e
        except json.JSONDecodeError as e:
            raise ValueError(
                f"Job state file contains invalid JSON: {self.job_state_file_path}"
            ) from e

        if not isinstance(data, dict):
            raise ValueError("Job state file must hold a JSON object")

        try:
            job_state = JobState.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Job state file is not a valid job state: {e}") from e

        logger.debug(f"Loaded job state for '{job_state.name}' from {self.job_state_file_path}")
        return job_state


def load_settings() -> Settings:
    """Load and validate settings from the environment.

    Required environment variables:
    - NOTIFY_PROTOCOL: UDP, TCP or HTTP.
    - NOTIFY_ENDPOINT: Destination for the chosen transport.
    - JOB_STATE_FILE_PATH: Path to JSON file with the job state.

    Optional:
    - NOTIFY_FORMAT: JSON (default) or XML.
    - NOTIFY_TIMEOUT_MS: Positive integer, default 30000.
    - NOTIFY_MAX_REDIRECTS: Non-negative integer, default 10.
    - NOTIFY_PROXY_HOST / NOTIFY_PROXY_PORT: Explicit HTTP proxy.

    Returns:
        Validated Settings object.

    Raises:
        RuntimeError: If required env vars missing or invalid.
        ValueError: If configuration is invalid.
    """
    try:
        protocol = os.environ["NOTIFY_PROTOCOL"]
        endpoint = os.environ["NOTIFY_ENDPOINT"]
        job_state_path = os.environ["JOB_STATE_FILE_PATH"]
    except KeyError as e:
        raise RuntimeError(f"Missing required environment variable: {e.args[0]}") from e

    optional: dict[str, object] = {}
    for env_name, field_name in (
        ("NOTIFY_FORMAT", "format"),
        ("NOTIFY_PROXY_HOST", "proxy_host"),
    ):
        value = os.getenv(env_name)
        if value:
            optional[field_name] = value

    for env_name, field_name in (
        ("NOTIFY_TIMEOUT_MS", "timeout_ms"),
        ("NOTIFY_MAX_REDIRECTS", "max_redirects"),
        ("NOTIFY_PROXY_PORT", "proxy_port"),
    ):
        raw = os.getenv(env_name)
        if not raw:
            continue
        try:
            optional[field_name] = int(raw)
        except ValueError as e:
            raise RuntimeError(f"{env_name} must be an integer (got: {raw})") from e

    settings = Settings(
        protocol=protocol,
        endpoint=endpoint,
        job_state_file_path=job_state_path,
        **optional,
    )

    logger.info(
        f"Notifier configured: protocol={settings.protocol.value}, "
        f"endpoint={settings.endpoint}, "
        f"format={settings.format.value}, "
        f"timeout={settings.timeout_ms}ms, "
        f"proxy={settings.proxy.url if settings.proxy else '<environment>'}"
    )

    return settings
