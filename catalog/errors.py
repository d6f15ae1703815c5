"""Catalog-level exceptions.

Every failure surfaced by the catalog core derives from CatalogError so
callers can catch them uniformly. Name derivations have no error of their
own: they are total, and absent or malformed sub-objects are skipped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from catalog.models.validation import ValidationIssue


class CatalogError(Exception):
    """Base class for all catalog errors."""


class ValidationError(CatalogError):
    """A document failed schema or invariant validation.

    Carries every issue found so the caller can report them all at once.
    Nothing is persisted when this is raised.
    """

    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = list(issues)
        summary = "; ".join(f"{issue.path}: {issue.message}" for issue in self.issues)
        super().__init__(f"Product document is invalid: {summary}")


class DependencyUnavailable(CatalogError):
    """A collaborator (counter, slug index or store) could not be reached."""

    retryable = True

    def __init__(self, dependency: str, reason: str) -> None:
        self.dependency = dependency
        super().__init__(f"{dependency} unavailable: {reason}")


class ProductNotFoundError(CatalogError):
    """A requested product does not exist."""
