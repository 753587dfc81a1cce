"""In-memory implementation of TeamRequirementsStore."""

from collections.abc import Mapping

from rollcall.observability.logging import get_logger
from rollcall.onboarding.matrix import apply_overrides
from rollcall.onboarding.models import TeamKey, TeamRequirements
from rollcall.onboarding.store import TeamRequirementsStore
from rollcall.onboarding.teams import normalize_team_name

logger = get_logger(__name__)


class InMemoryTeamRequirementsStore(TeamRequirementsStore):
    """In-memory implementation of TeamRequirementsStore for testing and development."""

    def __init__(self, defaults: Mapping[TeamKey, TeamRequirements] | None = None) -> None:
        self._defaults: dict[TeamKey, TeamRequirements] = dict(defaults or {})
        self._overrides: dict[TeamKey, TeamRequirements] = {}

    async def get_table(self) -> dict[TeamKey, TeamRequirements]:
        return apply_overrides(self._defaults, self._overrides)

    async def get_team(self, team: str) -> TeamRequirements | None:
        key = normalize_team_name(team, aliases={})
        if key in self._overrides:
            return self._overrides[key]
        return self._defaults.get(key)

    async def save_team(self, team: str, requirements: TeamRequirements) -> TeamKey:
        key = normalize_team_name(team, aliases={})
        self._overrides[key] = requirements
        logger.info("team_override_saved", team_key=key, is_new_team=key not in self._defaults)
        return key

    async def reset_team(self, team: str) -> bool:
        key = normalize_team_name(team, aliases={})
        if key not in self._overrides:
            return False
        del self._overrides[key]
        logger.info("team_override_reset", team_key=key)
        return True

    async def list_overrides(self) -> dict[TeamKey, TeamRequirements]:
        return dict(self._overrides)
