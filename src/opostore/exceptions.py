"""Custom exception hierarchy for opostore."""

from __future__ import annotations


class OpoError(Exception):
    """Base exception for all opostore errors."""


class OpoConfigError(OpoError):
    """Invalid or missing configuration."""


class StorageError(OpoError):
    """Persisted state could not be read or written."""

    def __init__(self, message: str, *, key: str = "") -> None:
        self.key = key
        super().__init__(message)


class StorageReadError(StorageError):
    """Stored blob is malformed or the backend refused the read.

    The cart store recovers from this locally by substituting an empty cart.
    """


class StorageWriteError(StorageError):
    """Backend refused to persist a value (quota, permissions, I/O)."""


class CatalogError(OpoError):
    """Base for catalog lookup failures."""


class CatalogTransportError(CatalogError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class ProductNotFoundError(CatalogError):
    """No catalog row matched the requested id or slug."""

    def __init__(
        self,
        message: str,
        *,
        slug: str | None = None,
        product_id: str | None = None,
    ) -> None:
        self.slug = slug
        self.product_id = product_id
        super().__init__(message)
