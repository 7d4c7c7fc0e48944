"""Admin side: session authentication and the guarded mutation routes."""

from .auth import BackofficeAuth, SessionCookie  # noqa: F401
from .router import router as backoffice_router  # noqa: F401
