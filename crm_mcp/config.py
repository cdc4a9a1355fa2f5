"""
Server configuration
Read once from the process environment at startup and injected into adapters
"""

import logging
import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class ServerConfig(BaseModel):
    """Configuration for one vendor MCP server"""
    model_config = ConfigDict(frozen=True)

    vendor: str
    credential: Optional[str] = Field(default=None, repr=False)
    credential_env: Optional[str] = None
    base_url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT

    # Transport
    transport: Literal["stdio", "sse", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 9000

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "text"

    @classmethod
    def from_env(
        cls,
        vendor: str,
        credential_env: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ServerConfig":
        """
        Build configuration from environment variables

        Args:
            vendor: Vendor key (e.g. 'pipedrive')
            credential_env: Name of the variable holding the process-wide
                credential, or None when the vendor takes it per call
            environ: Mapping to read from (defaults to os.environ)
        """
        env = os.environ if environ is None else environ
        prefix = vendor.upper()

        try:
            timeout = float(env.get("CRM_MCP_TIMEOUT", DEFAULT_TIMEOUT))
            port = int(env.get("MCP_PORT", 9000))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric configuration: {e}") from e

        values = {
            "vendor": vendor,
            "credential": env.get(credential_env) if credential_env else None,
            "credential_env": credential_env,
            "base_url": env.get(f"{prefix}_BASE_URL") or None,
            "timeout": timeout,
            "transport": env.get("MCP_TRANSPORT", "stdio").lower(),
            "host": env.get("MCP_HOST", "127.0.0.1"),
            "port": port,
            "log_level": env.get("LOG_LEVEL", "INFO").upper(),
            "log_format": env.get("LOG_FORMAT", "text").lower(),
        }
        try:
            return cls(**values)
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration for {vendor}: {e}") from e

    def validate_required(self) -> None:
        """Fail fast when the vendor needs a credential that is not set"""
        if self.credential_env and not self.credential:
            raise ConfigurationError(
                f"ERROR: {self.credential_env} environment variable is required",
                missing=[self.credential_env]
            )

        logger.info(f"✅ Configuration for {self.vendor} is complete")
