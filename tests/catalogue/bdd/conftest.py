"""Shared BDD fixtures for the Catalogue domain."""

import pytest


@pytest.fixture()
def error():
    """Container for errors captured by When steps."""
    return {"exc": None}
