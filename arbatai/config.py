# arbatai/config.py
import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel

from .errors import ConfigurationError


DEFAULT_CATALOG_PATH = Path("data") / "catalog.json"


class Settings(BaseModel):
    """Runtime configuration for the catalog service.

    The password is optional here so that the public catalog keeps working
    without it; backoffice operations ask for it via ``require_password()``.
    """

    backoffice_password: Optional[str] = None
    backoffice_session_secret: Optional[str] = None
    catalog_path: Path = DEFAULT_CATALOG_PATH
    environment: str = "development"
    log_level: str = "INFO"

    @property
    def cookie_secure(self) -> bool:
        return self.environment != "development"

    def require_password(self) -> str:
        if not self.backoffice_password:
            raise ConfigurationError("Missing required env var: BACKOFFICE_PASSWORD")
        return self.backoffice_password

    def session_secret(self) -> str:
        # A dedicated signing secret is optional; fall back to the password.
        return self.backoffice_session_secret or self.require_password()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Create settings from environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            backoffice_password=env.get("BACKOFFICE_PASSWORD") or None,
            backoffice_session_secret=env.get("BACKOFFICE_SESSION_SECRET") or None,
            catalog_path=Path(env.get("CATALOG_PATH") or DEFAULT_CATALOG_PATH),
            environment=env.get("APP_ENV") or "development",
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )
