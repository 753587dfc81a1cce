"""Team requirements store implementations."""

from rollcall.onboarding.stores.inmemory import InMemoryTeamRequirementsStore

__all__ = ["InMemoryTeamRequirementsStore"]
