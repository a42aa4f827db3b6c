"""Runtime configuration for the content scanner.

The API token and connection settings are passed in explicitly; nothing is
read from or written to persistent storage by this package.
"""

import os

from pydantic import BaseModel, Field

DEFAULT_API_URL = "https://api.buttercms.com/v2"


class ScannerConfig(BaseModel):
    """Connection settings for the content API."""

    token: str | None = Field(default=None, description="Read API token for the content source")
    api_url: str = Field(default=DEFAULT_API_URL, description="Base URL of the content API")
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    max_retries: int = Field(default=3, ge=1, description="Attempts per page request")
    retry_delay: float = Field(
        default=1.0, ge=0, description="Base delay in seconds, multiplied by the attempt number"
    )
    page_size: int = Field(default=100, ge=1, le=100, description="Items requested per page")

    @classmethod
    def from_env(cls) -> "ScannerConfig":
        """Build a config from BUTTER_CMS_* environment variables."""
        return cls(
            token=os.environ.get("BUTTER_CMS_TOKEN") or None,
            api_url=os.environ.get("BUTTER_CMS_API_URL", DEFAULT_API_URL),
            timeout=float(os.environ.get("BUTTER_CMS_TIMEOUT", "30")),
            max_retries=int(os.environ.get("BUTTER_CMS_MAX_RETRIES", "3")),
            retry_delay=float(os.environ.get("BUTTER_CMS_RETRY_DELAY", "1.0")),
        )

    def with_token(self, token: str | None) -> "ScannerConfig":
        """Return a copy using token when one is given."""
        if not token:
            return self
        return self.model_copy(update={"token": token})
