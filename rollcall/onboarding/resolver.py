"""Requirement resolver.

Merges the requirements of every team a person is onboarding for (or has
completed) into one RequiredSteps record. Each boolean is the OR across
the teams and the covenant tier is the highest tier, so adding a team can
only add requirements.
"""

from collections.abc import Iterable, Mapping

from rollcall.observability.logging import get_logger
from rollcall.onboarding.enums import CovenantTier
from rollcall.onboarding.models import RequiredSteps, TeamKey, TeamRequirements
from rollcall.onboarding.teams import normalize_team_name

logger = get_logger(__name__)

# Flags copied straight across from TeamRequirements by OR
_MERGED_FLAGS: tuple[str, ...] = (
    "background_check",
    "references",
    "child_safety",
    "mandated_reporter",
    "welcome_to_rcc",
    "membership",
    "life_group",
    "discipleship",
    "leadership",
)


def _known_requirements(
    team_table: Mapping[TeamKey, TeamRequirements],
    labels: Iterable[str],
    aliases: Mapping[str, TeamKey] | None,
) -> list[TeamRequirements]:
    found: list[TeamRequirements] = []
    seen: set[TeamKey] = set()
    for label in labels:
        key = normalize_team_name(label, aliases)
        if key in seen:
            continue
        seen.add(key)
        requirements = team_table.get(key)
        if requirements is None:
            # The table can lag behind newly created teams
            logger.debug("unknown_team_skipped", team=label, team_key=key)
            continue
        found.append(requirements)
    return found


def covenant_tier_for(
    team_table: Mapping[TeamKey, TeamRequirements],
    team_keys: Iterable[str],
    aliases: Mapping[str, TeamKey] | None = None,
) -> CovenantTier:
    """Highest covenant tier required by any of the given teams."""
    tiers = [req.covenant_tier for req in _known_requirements(team_table, team_keys, aliases)]
    return max(tiers, default=CovenantTier.NONE)


def resolve(
    team_table: Mapping[TeamKey, TeamRequirements],
    active_team_keys: Iterable[str],
    completed_team_keys: Iterable[str] = (),
    aliases: Mapping[str, TeamKey] | None = None,
) -> RequiredSteps:
    """Merge team requirements into a single RequiredSteps record.

    Team labels are normalized before lookup. Unknown teams contribute no
    requirements and never raise. To show a single team's requirements,
    pass just that team as ``active_team_keys``.

    Args:
        team_table: Requirements keyed by normalized team key
        active_team_keys: Teams the person is onboarding for (raw labels ok)
        completed_team_keys: Teams the person has completed onboarding for
        aliases: Alias table for normalization (defaults to the built-in one)

    Returns:
        Merged requirements
    """
    active = list(active_team_keys)
    completed = list(completed_team_keys)
    requirements = _known_requirements(team_table, [*active, *completed], aliases)

    merged: dict[str, object] = {
        flag: any(getattr(req, flag) for req in requirements) for flag in _MERGED_FLAGS
    }
    merged["covenant_tier"] = max(
        (req.covenant_tier for req in requirements), default=CovenantTier.NONE
    )
    required = RequiredSteps.model_validate(merged)

    logger.debug(
        "team_requirements_resolved",
        active_teams=active,
        completed_teams=completed,
        matched_team_count=len(requirements),
        covenant_tier=int(required.covenant_tier),
    )
    return required


class RequirementResolver:
    """Resolver bound to a team table and alias table.

    Usage:
        resolver = RequirementResolver(load_default_team_table())
        required = resolver.resolve(["Kids"], ["Usher"])
    """

    def __init__(
        self,
        team_table: Mapping[TeamKey, TeamRequirements],
        aliases: Mapping[str, TeamKey] | None = None,
    ) -> None:
        self._team_table = team_table
        self._aliases = aliases

    @property
    def team_table(self) -> Mapping[TeamKey, TeamRequirements]:
        return self._team_table

    @property
    def aliases(self) -> Mapping[str, TeamKey] | None:
        return self._aliases

    def resolve(
        self,
        active_team_keys: Iterable[str],
        completed_team_keys: Iterable[str] = (),
    ) -> RequiredSteps:
        return resolve(self._team_table, active_team_keys, completed_team_keys, self._aliases)

    def resolve_team(self, team: str) -> RequiredSteps:
        """Requirements of a single selected team."""
        return resolve(self._team_table, [team], (), self._aliases)

    def resolve_keys(self, team_keys: Iterable[TeamKey]) -> RequiredSteps:
        """Requirements for keys that are already normalized.

        Aliases are not applied again, so a key produced by
        normalize_team_name maps to the same table entry it named.
        """
        return resolve(self._team_table, team_keys, (), aliases={})

    def covenant_tier_for(self, team_keys: Iterable[str]) -> CovenantTier:
        return covenant_tier_for(self._team_table, team_keys, self._aliases)
