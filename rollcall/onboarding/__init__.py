"""Onboarding requirements and progress.

Two pure computations over supplied data:
- resolve: merge the requirements of a person's teams into RequiredSteps
- evaluate: turn RequiredSteps plus a person snapshot into ordered Steps

Plus the pieces around them: the packaged team matrix, the requirements
store used by the admin editor, the snapshot builder for directory data
and the OnboardingEngine facade used by views.
"""

from rollcall.onboarding.engine import OnboardingEngine, RosterEntry, RosterSummary
from rollcall.onboarding.enums import (
    BackgroundCheckOutcome,
    BackgroundCheckStatus,
    CovenantTier,
    FieldStatus,
    StepCategory,
)
from rollcall.onboarding.evaluator import StepEvaluator, evaluate
from rollcall.onboarding.matrix import (
    TeamMatrixError,
    apply_overrides,
    load_default_team_table,
    load_team_table,
)
from rollcall.onboarding.models import (
    BackgroundCheckDetail,
    BackgroundCheckRecord,
    EvaluationPolicy,
    OnboardingProgress,
    PersonFieldSnapshot,
    RequiredSteps,
    Step,
    TeamRequirements,
    TrainingField,
    TwoPhaseField,
)
from rollcall.onboarding.resolver import RequirementResolver, resolve
from rollcall.onboarding.snapshot import DirectoryRecord, build_snapshot
from rollcall.onboarding.store import TeamRequirementsStore

__all__ = [
    # Enums
    "BackgroundCheckOutcome",
    "BackgroundCheckStatus",
    "CovenantTier",
    "FieldStatus",
    "StepCategory",
    # Models
    "BackgroundCheckDetail",
    "BackgroundCheckRecord",
    "EvaluationPolicy",
    "OnboardingProgress",
    "PersonFieldSnapshot",
    "RequiredSteps",
    "Step",
    "TeamRequirements",
    "TrainingField",
    "TwoPhaseField",
    # Resolution and evaluation
    "RequirementResolver",
    "StepEvaluator",
    "evaluate",
    "resolve",
    # Matrix and storage
    "TeamMatrixError",
    "TeamRequirementsStore",
    "apply_overrides",
    "load_default_team_table",
    "load_team_table",
    # Snapshots
    "DirectoryRecord",
    "build_snapshot",
    # Facade
    "OnboardingEngine",
    "RosterEntry",
    "RosterSummary",
]
