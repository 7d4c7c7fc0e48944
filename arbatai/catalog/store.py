"""
File-backed store for the catalog document.

The whole catalog lives in one JSON file. Readers always get a complete
document: writes go to a temporary file in the same directory which is
then renamed over the real one with ``os.replace``. There is no lock
between processes; two concurrent read-modify-write cycles can lose an
update (last write wins).
"""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from pydantic import ValidationError as PydanticValidationError

from ..errors import StorageError
from .schemas import CATALOG_VERSION, CatalogData, Category, Product, StoredModel


logger = logging.getLogger(__name__)

DEFAULT_FILE_MODE = 0o644


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def empty_catalog(now: Optional[datetime] = None) -> CatalogData:
    return CatalogData(
        version=CATALOG_VERSION,
        updated_at=now or utcnow(),
        categories=[],
        products=[],
    )


def _has_valid_shape(raw: Any) -> bool:
    return (
        isinstance(raw, dict)
        and raw.get("version") == CATALOG_VERSION
        and isinstance(raw.get("categories"), list)
        and isinstance(raw.get("products"), list)
    )


class CatalogStore:
    """Read and atomically replace the catalog JSON document at ``path``."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def read_catalog(self) -> CatalogData:
        """Load the document from disk.

        A missing or malformed file yields a fresh empty catalog instead of
        an error. Entries that do not validate are dropped and logged, the
        rest of the document is kept. Any other I/O problem is raised as
        ``StorageError``.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No catalog at %s, starting empty", self.path)
            return empty_catalog()
        except OSError as exc:
            raise StorageError(f"Cannot read catalog {self.path}: {exc}") from exc
        except UnicodeDecodeError:
            logger.warning("Catalog %s is not UTF-8 text, treating it as empty", self.path)
            return empty_catalog()

        try:
            raw = json.loads(text)
        except ValueError:
            logger.warning("Catalog %s is not valid JSON, treating it as empty", self.path)
            return empty_catalog()

        if not _has_valid_shape(raw):
            logger.warning(
                "Catalog %s has an unsupported version or shape, treating it as empty",
                self.path,
            )
            return empty_catalog()

        return self._validate_entries(raw)

    def _drop_invalid(self, model: Type[StoredModel], entries: List[Any], kind: str) -> List[Any]:
        kept = []
        for index, entry in enumerate(entries):
            try:
                kept.append(model.model_validate(entry))
            except PydanticValidationError as exc:
                logger.warning(
                    "Catalog %s: dropping invalid %s at index %d (%d errors)",
                    self.path,
                    kind,
                    index,
                    exc.error_count(),
                )
        return kept

    def _validate_entries(self, raw: Dict[str, Any]) -> CatalogData:
        # Invalid entries are dropped one by one; the valid rest survives.
        categories = self._drop_invalid(Category, raw["categories"], "category")
        products = self._drop_invalid(Product, raw["products"], "product")

        head = {k: v for k, v in raw.items() if k not in ("categories", "products")}
        try:
            doc = CatalogData.model_validate(head)
        except PydanticValidationError:
            logger.warning("Catalog %s has an invalid updatedAt, resetting it", self.path)
            head.pop("updatedAt", None)
            head.pop("updated_at", None)
            doc = CatalogData.model_validate({**head, "updatedAt": utcnow()})
        return doc.model_copy(update={"categories": categories, "products": products})

    def _target_mode(self) -> int:
        # mkstemp creates 0600 files; keep the mode readers already rely on.
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            return DEFAULT_FILE_MODE

    def write_catalog(self, doc: CatalogData) -> None:
        """Persist ``doc`` with a temp file + atomic rename."""
        payload = json.dumps(
            doc.model_dump(mode="json", by_alias=True, exclude_none=True),
            ensure_ascii=False,
            indent=2,
        ) + "\n"

        directory = self.path.parent
        tmp_path: Optional[str] = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=directory, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, self._target_mode())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as exc:
            raise StorageError(f"Cannot write catalog {self.path}: {exc}") from exc
        finally:
            if tmp_path is not None:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    logger.warning("Could not remove temporary file %s", tmp_path)

        logger.debug(
            "Wrote catalog %s (%d categories, %d products)",
            self.path,
            len(doc.categories),
            len(doc.products),
        )
