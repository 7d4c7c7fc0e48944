# arbatai/main.py
import logging
from typing import Optional

from fastapi import FastAPI

from .backoffice import BackofficeAuth, backoffice_router
from .catalog import CatalogStore, catalog_router
from .config import Settings


logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(
        title="Arbatai catalog",
        description=(
            "Catalog backend for the Arbatai storefront: public product "
            "listing and a password-protected backoffice for managing "
            "categories and products."
        ),
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.catalog_store = CatalogStore(settings.catalog_path)
    app.state.backoffice_auth = BackofficeAuth(settings)

    app.include_router(catalog_router)
    app.include_router(backoffice_router)

    @app.get("/")
    def health_check():
        return {"status": "ok"}

    logger.info("Catalog stored at %s", settings.catalog_path)
    return app


app = create_app()
