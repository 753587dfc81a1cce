"""Step/status evaluator.

Walks the fixed category order and emits a Step for every category the
merged requirements mark applicable. Order matters: steps are numbered in
the UI, and the declaration must come before the background check.
"""

from datetime import date

from rollcall.observability.logging import get_logger
from rollcall.onboarding.enums import (
    BackgroundCheckOutcome,
    BackgroundCheckStatus,
    CovenantTier,
    FieldStatus,
    StepCategory,
)
from rollcall.onboarding.fields import is_within_years
from rollcall.onboarding.models import (
    BackgroundCheckDetail,
    BackgroundCheckRecord,
    EvaluationPolicy,
    OnboardingProgress,
    PersonFieldSnapshot,
    RequiredSteps,
    Step,
    StepTemplate,
    TrainingField,
    TwoPhaseField,
)
from rollcall.onboarding.templates import (
    EXPIRED_DESCRIPTION,
    NOT_CLEARED_DESCRIPTION,
    StepTemplates,
)

logger = get_logger(__name__)

IN_REVIEW_STATUSES: frozenset[BackgroundCheckStatus] = frozenset({
    BackgroundCheckStatus.REPORT_PROCESSING,
    BackgroundCheckStatus.NEEDS_REVIEW,
    BackgroundCheckStatus.PENDING_REVIEW,
})

CLEARED_STATUSES: frozenset[BackgroundCheckStatus] = frozenset({
    BackgroundCheckStatus.MANUAL_CLEAR,
    BackgroundCheckStatus.COMPLETE_CLEAR,
})

NOT_CLEARED_STATUSES: frozenset[BackgroundCheckStatus] = frozenset({
    BackgroundCheckStatus.MANUAL_NOT_CLEAR,
    BackgroundCheckStatus.NOT_CLEAR,
    BackgroundCheckStatus.DENIED,
})


def two_phase_status(field: TwoPhaseField) -> FieldStatus:
    """Submitted by the volunteer, then reviewed by staff."""
    if field.reviewed:
        return FieldStatus.COMPLETE
    if field.submitted:
        return FieldStatus.PENDING_ADMIN
    return FieldStatus.PENDING_USER


def training_status(field: TrainingField, years: int, today: date) -> FieldStatus:
    """Training is complete while its last completion is inside the window.

    A recorded completion counts even without the submitted flag; staff
    often enter the date directly.
    """
    if is_within_years(field.last_completed, years, today):
        return FieldStatus.COMPLETE
    if field.submitted:
        return FieldStatus.PENDING_ADMIN
    return FieldStatus.PENDING_USER


def classify_background_check(
    record: BackgroundCheckRecord | None,
    today: date,
) -> tuple[FieldStatus, BackgroundCheckOutcome]:
    """Map a provider record to a step status and outcome.

    Unknown provider statuses land in pending_admin so they get human
    attention; they are never treated as cleared.
    """
    if record is None:
        return FieldStatus.PENDING_USER, BackgroundCheckOutcome.NOT_SUBMITTED

    status = record.known_status
    if status is BackgroundCheckStatus.AWAITING_APPLICANT:
        return FieldStatus.PENDING_USER, BackgroundCheckOutcome.IN_PROGRESS
    if status in IN_REVIEW_STATUSES:
        return FieldStatus.PENDING_ADMIN, BackgroundCheckOutcome.IN_REVIEW
    if status in CLEARED_STATUSES:
        if record.expires_on is None or record.expires_on >= today:
            return FieldStatus.COMPLETE, BackgroundCheckOutcome.CLEARED
        return FieldStatus.PENDING_USER, BackgroundCheckOutcome.EXPIRED
    if status in NOT_CLEARED_STATUSES:
        return FieldStatus.PENDING_ADMIN, BackgroundCheckOutcome.NOT_CLEARED

    logger.warning("unknown_background_check_status", status=record.status)
    return FieldStatus.PENDING_ADMIN, BackgroundCheckOutcome.UNKNOWN


def flag_status(value: bool | None) -> FieldStatus:
    """Single yes/no requirement; None means the directory doesn't track it."""
    if value is None:
        return FieldStatus.NOT_STARTED
    return FieldStatus.COMPLETE if value else FieldStatus.PENDING_USER


class StepEvaluator:
    """Builds the ordered onboarding steps for a person.

    Pure: the same inputs always produce the same OnboardingProgress.
    """

    def __init__(
        self,
        templates: StepTemplates | None = None,
        policy: EvaluationPolicy | None = None,
    ) -> None:
        self._templates = templates or StepTemplates()
        self._policy = policy or EvaluationPolicy()

    @property
    def policy(self) -> EvaluationPolicy:
        return self._policy

    def evaluate(
        self,
        required: RequiredSteps,
        snapshot: PersonFieldSnapshot,
        today: date,
    ) -> OnboardingProgress:
        """Evaluate every applicable step.

        Args:
            required: Merged team requirements
            snapshot: The person's normalized field values
            today: Reference date for expiry and training windows

        Returns:
            Steps in display order with completed/total counts
        """
        steps: list[Step] = []

        def add(
            category: StepCategory,
            template: StepTemplate,
            status: FieldStatus,
            **extra: object,
        ) -> None:
            steps.append(
                Step(
                    number=len(steps) + 1,
                    category=category,
                    title=template.title,
                    description=extra.pop("description", template.description),
                    link=template.link,
                    status=status,
                    **extra,
                )
            )

        if required.declaration:
            add(
                StepCategory.DECLARATION,
                self._templates.for_category(StepCategory.DECLARATION),
                two_phase_status(snapshot.declaration),
            )

        if required.background_check:
            category, template, status, extra = self._background_check_step(
                snapshot.background_check, today
            )
            add(category, template, status, **extra)

        if required.child_safety:
            add(
                StepCategory.CHILD_SAFETY,
                self._templates.for_category(StepCategory.CHILD_SAFETY),
                training_status(snapshot.child_safety, self._policy.child_safety_years, today),
            )

        if required.mandated_reporter:
            add(
                StepCategory.MANDATED_REPORTER,
                self._templates.for_category(StepCategory.MANDATED_REPORTER),
                training_status(
                    snapshot.mandated_reporter, self._policy.mandated_reporter_years, today
                ),
            )

        if required.references:
            add(
                StepCategory.REFERENCES,
                self._templates.for_category(StepCategory.REFERENCES),
                two_phase_status(snapshot.references),
            )

        if required.requires_covenant:
            # Only the highest tier is shown; its form covers the lower ones
            tier = required.covenant_tier
            add(
                StepCategory.COVENANT,
                self._templates.for_covenant(tier),
                FieldStatus.COMPLETE if snapshot.covenant_signed_for(tier) else FieldStatus.PENDING_USER,
                covenant_tier=tier,
            )

        if self._policy.include_additional_requirements:
            if required.welcome_to_rcc:
                add(
                    StepCategory.WELCOME_TO_RCC,
                    self._templates.for_category(StepCategory.WELCOME_TO_RCC),
                    flag_status(snapshot.welcome_to_rcc),
                )
            if required.membership:
                add(
                    StepCategory.MEMBERSHIP,
                    self._templates.for_category(StepCategory.MEMBERSHIP),
                    flag_status(snapshot.membership),
                )

        completed = sum(1 for step in steps if step.status is FieldStatus.COMPLETE)
        progress = OnboardingProgress(steps=steps, completed=completed, total=len(steps))

        logger.debug(
            "onboarding_evaluated",
            person_id=snapshot.person_id,
            completed=progress.completed,
            total=progress.total,
        )
        return progress

    def _background_check_step(
        self,
        record: BackgroundCheckRecord | None,
        today: date,
    ) -> tuple[StepCategory, StepTemplate, FieldStatus, dict[str, object]]:
        template = self._templates.for_category(StepCategory.BACKGROUND_CHECK)
        status, outcome = classify_background_check(record, today)
        detail = BackgroundCheckDetail(
            status=record.status if record else None,
            outcome=outcome,
            completed_at=record.completed_at if record else None,
            expires_on=record.expires_on if record else None,
            needs_escalation=outcome is BackgroundCheckOutcome.NOT_CLEARED,
        )
        extra: dict[str, object] = {"background_check": detail}
        if outcome is BackgroundCheckOutcome.NOT_CLEARED:
            extra["description"] = NOT_CLEARED_DESCRIPTION
        elif outcome is BackgroundCheckOutcome.EXPIRED:
            extra["description"] = EXPIRED_DESCRIPTION
        return StepCategory.BACKGROUND_CHECK, template, status, extra


def evaluate(
    required: RequiredSteps,
    snapshot: PersonFieldSnapshot,
    today: date,
    *,
    templates: StepTemplates | None = None,
    policy: EvaluationPolicy | None = None,
) -> OnboardingProgress:
    """Evaluate onboarding steps with default templates and policy."""
    return StepEvaluator(templates, policy).evaluate(required, snapshot, today)
