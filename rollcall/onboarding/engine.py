"""Onboarding engine facade.

One entry point for every view that shows onboarding progress: the
volunteer's own checklist, the per-team breakdown and the leader roster.
Each view only chooses which teams to consider; the resolve-then-evaluate
computation is shared.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from rollcall.observability.logging import get_logger
from rollcall.onboarding.enums import FieldStatus
from rollcall.onboarding.evaluator import StepEvaluator
from rollcall.onboarding.matrix import load_default_team_table, load_team_table
from rollcall.onboarding.models import (
    OnboardingProgress,
    PersonFieldSnapshot,
    RequiredSteps,
    TeamKey,
    TeamRequirements,
)
from rollcall.onboarding.resolver import RequirementResolver
from rollcall.onboarding.teams import merged_aliases, normalize_team_name
from rollcall.onboarding.templates import StepTemplates

if TYPE_CHECKING:
    from rollcall.config.settings import Settings

logger = get_logger(__name__)


class RosterEntry(BaseModel):
    """One volunteer's row on a leader dashboard."""

    model_config = ConfigDict(frozen=True)

    person_id: str | None
    teams: list[TeamKey] = Field(default_factory=list)
    progress: OnboardingProgress

    @property
    def needs_admin(self) -> bool:
        return any(step.status is FieldStatus.PENDING_ADMIN for step in self.progress.steps)


class RosterSummary(BaseModel):
    """Onboarding progress across many volunteers."""

    model_config = ConfigDict(frozen=True)

    team: TeamKey | None = None
    entries: list[RosterEntry] = Field(default_factory=list)

    @property
    def volunteer_count(self) -> int:
        return len(self.entries)

    @property
    def complete_count(self) -> int:
        return sum(1 for entry in self.entries if entry.progress.is_complete)

    @property
    def needs_admin_count(self) -> int:
        return sum(1 for entry in self.entries if entry.needs_admin)

    @property
    def needs_escalation_count(self) -> int:
        return sum(1 for entry in self.entries if entry.progress.needs_escalation)


class OnboardingEngine:
    """Resolves requirements and evaluates steps for people.

    Usage:
        engine = OnboardingEngine(load_default_team_table())
        progress = engine.progress(snapshot, today=date.today())
    """

    def __init__(
        self,
        team_table: Mapping[TeamKey, TeamRequirements],
        evaluator: StepEvaluator | None = None,
        aliases: Mapping[str, TeamKey] | None = None,
    ) -> None:
        self._resolver = RequirementResolver(team_table, aliases)
        self._evaluator = evaluator or StepEvaluator()

    @classmethod
    def from_settings(cls, settings: Settings) -> OnboardingEngine:
        """Build an engine from the onboarding configuration section."""
        config = settings.onboarding
        if config.team_matrix_path is not None:
            team_table = load_team_table(config.team_matrix_path)
        else:
            team_table = load_default_team_table()

        evaluator = StepEvaluator(StepTemplates(links=config.links), config.policy())
        return cls(team_table, evaluator, merged_aliases(config.team_aliases))

    @property
    def resolver(self) -> RequirementResolver:
        return self._resolver

    def _key(self, team: str) -> TeamKey:
        return normalize_team_name(team, self._resolver.aliases)

    def _team_keys(self, labels: Iterable[str]) -> list[TeamKey]:
        keys: list[TeamKey] = []
        for label in labels:
            key = self._key(label)
            if key not in keys:
                keys.append(key)
        return keys

    def required_for(
        self,
        snapshot: PersonFieldSnapshot,
        team: str | None = None,
    ) -> RequiredSteps:
        """Requirements for a person, optionally restricted to one team."""
        if team is not None:
            return self._resolver.resolve_keys([self._key(team)])
        return self._resolver.resolve(
            snapshot.onboarding_in_progress_for,
            snapshot.onboarding_completed,
        )

    def progress(
        self,
        snapshot: PersonFieldSnapshot,
        today: date,
        team: str | None = None,
    ) -> OnboardingProgress:
        """Evaluate a person's onboarding steps."""
        return self._evaluator.evaluate(self.required_for(snapshot, team), snapshot, today)

    def _progress_for_key(
        self,
        snapshot: PersonFieldSnapshot,
        today: date,
        key: TeamKey,
    ) -> OnboardingProgress:
        return self._evaluator.evaluate(self._resolver.resolve_keys([key]), snapshot, today)

    def progress_by_team(
        self,
        snapshot: PersonFieldSnapshot,
        today: date,
    ) -> dict[TeamKey, OnboardingProgress]:
        """Progress for each team the person is onboarding for."""
        return {
            key: self._progress_for_key(snapshot, today, key)
            for key in self._team_keys(snapshot.onboarding_in_progress_for)
        }

    def roster(
        self,
        snapshots: Iterable[PersonFieldSnapshot],
        today: date,
        team: str | None = None,
    ) -> RosterSummary:
        """Summarize progress across volunteers.

        With ``team`` set, only people onboarding for or completed on that
        team are included and only that team's requirements are evaluated.
        """
        team_key = self._key(team) if team is not None else None
        return self._roster_for_key(snapshots, today, team_key)

    def _roster_for_key(
        self,
        snapshots: Iterable[PersonFieldSnapshot],
        today: date,
        team_key: TeamKey | None,
    ) -> RosterSummary:
        entries: list[RosterEntry] = []
        for snapshot in snapshots:
            teams = self._team_keys(
                [*snapshot.onboarding_in_progress_for, *snapshot.onboarding_completed]
            )
            if team_key is not None and team_key not in teams:
                continue
            entries.append(
                RosterEntry(
                    person_id=snapshot.person_id,
                    teams=teams,
                    progress=(
                        self.progress(snapshot, today)
                        if team_key is None
                        else self._progress_for_key(snapshot, today, team_key)
                    ),
                )
            )

        summary = RosterSummary(team=team_key, entries=entries)
        logger.info(
            "roster_summarized",
            team=team_key,
            volunteer_count=summary.volunteer_count,
            complete_count=summary.complete_count,
            needs_escalation_count=summary.needs_escalation_count,
        )
        return summary

    def roster_for_leader(
        self,
        leader: PersonFieldSnapshot,
        snapshots: Iterable[PersonFieldSnapshot],
        today: date,
    ) -> dict[TeamKey, RosterSummary]:
        """One roster per team listed in the leader's Ministry/Team Leader field."""
        people = list(snapshots)
        return {
            key: self._roster_for_key(people, today, key)
            for key in self._team_keys(leader.ministry_team_leader)
        }
