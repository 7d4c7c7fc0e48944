"""
Error types shared by the catalog and backoffice modules.

``CatalogError`` and its subclasses describe problems the admin can fix
(bad input, duplicate names). Their message is meant to be shown as-is.
``ConfigurationError`` and ``StorageError`` are fatal for the current
request and are left to propagate.
"""


class CatalogError(ValueError):
    """Base class for user-correctable catalog errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError):
    pass


class ConflictError(CatalogError):
    pass


class ConfigurationError(RuntimeError):
    pass


class StorageError(RuntimeError):
    pass
