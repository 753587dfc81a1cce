"""Test factories for creating test data."""

from tests.factories.onboarding import SnapshotFactory, TeamRequirementsFactory, required

__all__ = [
    "SnapshotFactory",
    "TeamRequirementsFactory",
    "required",
]
