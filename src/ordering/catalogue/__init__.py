"""Catalogue lookup factory.

Provides get_catalogue() / set_catalogue() to swap implementations:
- InMemoryCatalogue for development and testing
- CatalogueDomainLookup when the Catalogue domain runs in the same process
"""

import os

from ordering.catalogue.port import CatalogueLookup

_current_catalogue: CatalogueLookup | None = None


def get_catalogue() -> CatalogueLookup:
    """Return the configured catalogue lookup (singleton).

    Uses InMemoryCatalogue by default. Configure via the CATALOGUE_ADAPTER
    environment variable.
    """
    global _current_catalogue
    if _current_catalogue is None:
        adapter = os.environ.get("CATALOGUE_ADAPTER", "memory")
        if adapter == "memory":
            from ordering.catalogue.memory_adapter import InMemoryCatalogue

            _current_catalogue = InMemoryCatalogue()
        elif adapter == "domain":
            from catalogue.domain import catalogue
            from ordering.catalogue.domain_adapter import CatalogueDomainLookup

            _current_catalogue = CatalogueDomainLookup(catalogue)
        else:
            raise ValueError(f"Unknown catalogue adapter: {adapter}")
    return _current_catalogue


def set_catalogue(lookup: CatalogueLookup) -> None:
    """Override the active catalogue lookup (useful for tests)."""
    global _current_catalogue
    _current_catalogue = lookup


def reset_catalogue() -> None:
    """Reset to the default catalogue lookup."""
    global _current_catalogue
    _current_catalogue = None
