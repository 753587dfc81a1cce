"""TeamRequirementsStore abstract interface."""

from abc import ABC, abstractmethod

from rollcall.onboarding.models import TeamKey, TeamRequirements


class TeamRequirementsStore(ABC):
    """Abstract interface for team requirements configuration.

    Backs the admin editor. Overrides are kept apart from the packaged
    defaults so a team can be reset to its default entry.
    """

    @abstractmethod
    async def get_table(self) -> dict[TeamKey, TeamRequirements]:
        """Get the effective table: defaults with overrides applied."""
        pass

    @abstractmethod
    async def get_team(self, team: str) -> TeamRequirements | None:
        """Get the effective requirements for one team."""
        pass

    @abstractmethod
    async def save_team(self, team: str, requirements: TeamRequirements) -> TeamKey:
        """Save an override for a team, replacing any earlier one."""
        pass

    @abstractmethod
    async def reset_team(self, team: str) -> bool:
        """Drop a team's override. Returns False if there was none."""
        pass

    @abstractmethod
    async def list_overrides(self) -> dict[TeamKey, TeamRequirements]:
        """Get only the overridden teams."""
        pass
