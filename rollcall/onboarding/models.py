"""Onboarding domain models.

Team requirements are long-lived configuration. Everything else here is
recomputed from the latest person snapshot on every read and never stored.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from rollcall.onboarding.enums import (
    BackgroundCheckOutcome,
    BackgroundCheckStatus,
    CovenantTier,
    FieldStatus,
    StepCategory,
)

TeamKey = str


class TeamRequirements(BaseModel):
    """Compliance items a single team requires.

    Accepts the camelCase keys used by the admin editor and the team matrix
    JSON (``backgroundCheck``, ``welcomeToRCC``, ...) as well as field names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    background_check: bool = Field(default=False, alias="backgroundCheck")
    references: bool = False
    membership: bool = False
    welcome_to_rcc: bool = Field(default=False, alias="welcomeToRCC")
    child_safety: bool = Field(default=False, alias="childSafety")
    mandated_reporter: bool = Field(default=False, alias="mandatedReporter")
    discipleship: bool = False
    leadership: bool = False
    life_group: bool = Field(default=False, alias="lifeGroup")
    covenant: bool = Field(default=False, description="Tier 1 covenant")
    moral_conduct: bool = Field(
        default=False, alias="moralConduct", description="Tier 2 covenant"
    )
    public_presence: bool = Field(
        default=False, alias="publicPresence", description="Tier 3 covenant"
    )

    @property
    def covenant_tier(self) -> CovenantTier:
        """Highest covenant tier this team flags."""
        if self.public_presence:
            return CovenantTier.PUBLIC_PRESENCE
        if self.moral_conduct:
            return CovenantTier.MORAL_CONDUCT
        if self.covenant:
            return CovenantTier.COVENANT
        return CovenantTier.NONE


class RequiredSteps(BaseModel):
    """Merged requirements across a set of teams.

    Hashable, so callers may use it as a memoization key.
    """

    model_config = ConfigDict(frozen=True)

    background_check: bool = False
    references: bool = False
    child_safety: bool = False
    mandated_reporter: bool = False
    covenant_tier: CovenantTier = CovenantTier.NONE
    welcome_to_rcc: bool = False
    membership: bool = False
    life_group: bool = False
    discipleship: bool = False
    leadership: bool = False

    @property
    def declaration(self) -> bool:
        """The declaration form precedes every background check."""
        return self.background_check

    @property
    def requires_covenant(self) -> bool:
        return self.covenant_tier > CovenantTier.NONE

    def includes(self, other: "RequiredSteps") -> bool:
        """True when every requirement of ``other`` is also required here."""
        for name, value in other:
            if name == "covenant_tier":
                if other.covenant_tier > self.covenant_tier:
                    return False
            elif value and not getattr(self, name):
                return False
        return True


class TwoPhaseField(BaseModel):
    """Volunteer submits, staff reviews. Used by declaration and references."""

    model_config = ConfigDict(frozen=True)

    submitted: bool = False
    submitted_on: date | None = None
    reviewed: bool = False
    reviewed_on: date | None = None


class TrainingField(BaseModel):
    """Certification that must be renewed within a validity window."""

    model_config = ConfigDict(frozen=True)

    submitted: bool = False
    submitted_on: date | None = None
    last_completed: date | None = None


class BackgroundCheckRecord(BaseModel):
    """Latest record from the background-check provider."""

    model_config = ConfigDict(frozen=True)

    status: str = Field(..., description="Raw provider status")
    completed_at: datetime | None = None
    expires_on: date | None = None

    @property
    def known_status(self) -> BackgroundCheckStatus | None:
        """The provider status as an enum, or None when unrecognized."""
        try:
            return BackgroundCheckStatus(self.status.strip().lower())
        except ValueError:
            return None


class PersonFieldSnapshot(BaseModel):
    """A person's onboarding state, normalized from the upstream directory.

    Only typed values reach the evaluator; see ``rollcall.onboarding.snapshot``
    for the coercion of raw directory values.
    """

    model_config = ConfigDict(frozen=True)

    person_id: str | None = None
    declaration: TwoPhaseField = Field(default_factory=TwoPhaseField)
    references: TwoPhaseField = Field(default_factory=TwoPhaseField)
    child_safety: TrainingField = Field(default_factory=TrainingField)
    mandated_reporter: TrainingField = Field(default_factory=TrainingField)
    covenant_signed: bool = False
    moral_conduct_signed: bool = False
    public_presence_signed: bool = False
    welcome_to_rcc: bool | None = Field(
        default=None, description="None when the directory does not track it"
    )
    membership: bool | None = Field(
        default=None, description="None when the directory does not track it"
    )
    background_check: BackgroundCheckRecord | None = None
    onboarding_in_progress_for: list[str] = Field(default_factory=list)
    onboarding_completed: list[str] = Field(default_factory=list)
    ministry_team_leader: list[str] = Field(default_factory=list)

    def covenant_signed_for(self, tier: CovenantTier) -> bool:
        """Whether the form for exactly this tier is signed."""
        if tier is CovenantTier.PUBLIC_PRESENCE:
            return self.public_presence_signed
        if tier is CovenantTier.MORAL_CONDUCT:
            return self.moral_conduct_signed
        if tier is CovenantTier.COVENANT:
            return self.covenant_signed
        return False


class EvaluationPolicy(BaseModel):
    """Tunables for step evaluation."""

    model_config = ConfigDict(frozen=True)

    child_safety_years: int = Field(default=2, ge=1)
    mandated_reporter_years: int = Field(default=1, ge=1)
    include_additional_requirements: bool = False


class BackgroundCheckDetail(BaseModel):
    """Background-check status/date pair shown alongside the step."""

    model_config = ConfigDict(frozen=True)

    status: str | None = None
    outcome: BackgroundCheckOutcome
    completed_at: datetime | None = None
    expires_on: date | None = None
    needs_escalation: bool = False


class StepTemplate(BaseModel):
    """Static content for one step category."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    link: str | None = None


class Step(BaseModel):
    """One row of onboarding UI state."""

    model_config = ConfigDict(frozen=True)

    number: int = Field(..., ge=1, description="1-based position in the list")
    category: StepCategory
    title: str
    description: str
    link: str | None = None
    status: FieldStatus
    background_check: BackgroundCheckDetail | None = None
    covenant_tier: CovenantTier | None = None

    @property
    def is_complete(self) -> bool:
        return self.status is FieldStatus.COMPLETE


class OnboardingProgress(BaseModel):
    """Ordered steps plus the aggregate completion count."""

    model_config = ConfigDict(frozen=True)

    steps: list[Step] = Field(default_factory=list)
    completed: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)

    @property
    def ratio(self) -> float:
        if self.total == 0:
            return 0.0
        return self.completed / self.total

    @property
    def percent(self) -> int:
        return round(self.ratio * 100)

    @property
    def is_complete(self) -> bool:
        """All required steps complete. A person with no steps is not "complete"."""
        return self.total > 0 and self.completed == self.total

    @property
    def needs_escalation(self) -> bool:
        return any(
            step.background_check is not None and step.background_check.needs_escalation
            for step in self.steps
        )

    def step_for(self, category: StepCategory) -> Step | None:
        for step in self.steps:
            if step.category is category:
                return step
        return None
