"""Tests for the step/status evaluator."""

from datetime import date, datetime, timedelta

import pytest

from rollcall.onboarding.enums import (
    BackgroundCheckOutcome,
    CovenantTier,
    FieldStatus,
    StepCategory,
)
from rollcall.onboarding.evaluator import (
    StepEvaluator,
    classify_background_check,
    evaluate,
    training_status,
    two_phase_status,
)
from rollcall.onboarding.models import (
    BackgroundCheckRecord,
    EvaluationPolicy,
    StepTemplate,
    TrainingField,
    TwoPhaseField,
)
from rollcall.onboarding.templates import NOT_CLEARED_DESCRIPTION, StepTemplates
from tests.factories.onboarding import SnapshotFactory, required

TODAY = date(2025, 6, 15)


def clear(expires_on: date | None = None, status: str = "manual_clear") -> BackgroundCheckRecord:
    return BackgroundCheckRecord(
        status=status, completed_at=datetime(2024, 6, 1, 12, 0), expires_on=expires_on
    )


class TestScenarios:
    """End-to-end evaluation scenarios."""

    def test_background_check_and_references(self):
        """Declaration and background check complete, references awaiting review."""
        snapshot = SnapshotFactory.create(
            declaration=TwoPhaseField(submitted=True, reviewed=True),
            background_check=clear(),
            references=TwoPhaseField(submitted=True),
        )

        progress = evaluate(required(background_check=True, references=True), snapshot, TODAY)

        assert [(s.category, s.status) for s in progress.steps] == [
            (StepCategory.DECLARATION, FieldStatus.COMPLETE),
            (StepCategory.BACKGROUND_CHECK, FieldStatus.COMPLETE),
            (StepCategory.REFERENCES, FieldStatus.PENDING_ADMIN),
        ]
        assert progress.completed == 2
        assert progress.total == 3

    def test_nothing_required(self):
        """A team with no requirements yields no steps."""
        progress = evaluate(required(), SnapshotFactory.create(), TODAY)

        assert progress.steps == []
        assert progress.completed == 0
        assert progress.total == 0
        assert progress.ratio == 0.0
        assert progress.is_complete is False

    def test_everything_required_fresh_volunteer(self):
        """A brand-new volunteer sees every step awaiting them."""
        progress = evaluate(
            required(
                background_check=True,
                references=True,
                child_safety=True,
                mandated_reporter=True,
                covenant_tier=CovenantTier.MORAL_CONDUCT,
            ),
            SnapshotFactory.create(),
            TODAY,
        )

        assert [s.category for s in progress.steps] == [
            StepCategory.DECLARATION,
            StepCategory.BACKGROUND_CHECK,
            StepCategory.CHILD_SAFETY,
            StepCategory.MANDATED_REPORTER,
            StepCategory.REFERENCES,
            StepCategory.COVENANT,
        ]
        assert all(s.status is FieldStatus.PENDING_USER for s in progress.steps)
        assert [s.number for s in progress.steps] == [1, 2, 3, 4, 5, 6]
        assert progress.completed == 0
        assert progress.total == 6

    def test_fully_onboarded(self):
        """Every step complete gives a complete ratio."""
        progress = evaluate(
            required(
                background_check=True,
                references=True,
                child_safety=True,
                mandated_reporter=True,
                covenant_tier=CovenantTier.PUBLIC_PRESENCE,
            ),
            SnapshotFactory.fully_onboarded(TODAY),
            TODAY,
        )

        assert progress.completed == progress.total == 6
        assert progress.is_complete is True
        assert progress.percent == 100


class TestDeclaration:
    """Tests for the declaration step."""

    def test_present_only_with_background_check(self):
        snapshot = SnapshotFactory.create()

        with_check = evaluate(required(background_check=True), snapshot, TODAY)
        without_check = evaluate(required(references=True), snapshot, TODAY)

        assert with_check.step_for(StepCategory.DECLARATION) is not None
        assert without_check.step_for(StepCategory.DECLARATION) is None

    def test_precedes_background_check(self):
        progress = evaluate(required(background_check=True), SnapshotFactory.create(), TODAY)
        assert progress.steps[0].category is StepCategory.DECLARATION
        assert progress.steps[1].category is StepCategory.BACKGROUND_CHECK

    @pytest.mark.parametrize(
        "field,expected",
        [
            (TwoPhaseField(), FieldStatus.PENDING_USER),
            (TwoPhaseField(submitted=True), FieldStatus.PENDING_ADMIN),
            (TwoPhaseField(submitted=True, reviewed=True), FieldStatus.COMPLETE),
            (TwoPhaseField(reviewed=True), FieldStatus.COMPLETE),
        ],
    )
    def test_two_phase_status(self, field, expected):
        assert two_phase_status(field) is expected


class TestBackgroundCheck:
    """Tests for background-check classification."""

    def test_no_record(self):
        assert classify_background_check(None, TODAY) == (
            FieldStatus.PENDING_USER,
            BackgroundCheckOutcome.NOT_SUBMITTED,
        )

    def test_awaiting_applicant(self):
        record = BackgroundCheckRecord(status="awaiting_applicant")
        assert classify_background_check(record, TODAY)[0] is FieldStatus.PENDING_USER

    @pytest.mark.parametrize("status", ["report_processing", "needs_review", "pending_review"])
    def test_in_review(self, status):
        record = BackgroundCheckRecord(status=status)
        assert classify_background_check(record, TODAY) == (
            FieldStatus.PENDING_ADMIN,
            BackgroundCheckOutcome.IN_REVIEW,
        )

    @pytest.mark.parametrize("status", ["manual_clear", "complete_clear"])
    def test_cleared_without_expiry(self, status):
        assert classify_background_check(clear(status=status), TODAY) == (
            FieldStatus.COMPLETE,
            BackgroundCheckOutcome.CLEARED,
        )

    def test_expires_today_is_complete(self):
        assert classify_background_check(clear(TODAY), TODAY)[0] is FieldStatus.COMPLETE

    def test_expired_yesterday_is_pending_user(self):
        status, outcome = classify_background_check(clear(TODAY - timedelta(days=1)), TODAY)

        assert status is FieldStatus.PENDING_USER
        assert outcome is BackgroundCheckOutcome.EXPIRED

    @pytest.mark.parametrize("status", ["manual_not_clear", "not_clear", "denied"])
    def test_not_cleared(self, status):
        record = BackgroundCheckRecord(status=status)
        assert classify_background_check(record, TODAY) == (
            FieldStatus.PENDING_ADMIN,
            BackgroundCheckOutcome.NOT_CLEARED,
        )

    def test_unknown_status_needs_attention(self):
        """Unknown provider states are never treated as complete."""
        record = BackgroundCheckRecord(status="suspended_by_vendor")
        assert classify_background_check(record, TODAY) == (
            FieldStatus.PENDING_ADMIN,
            BackgroundCheckOutcome.UNKNOWN,
        )

    def test_status_case_insensitive(self):
        record = BackgroundCheckRecord(status=" Complete_Clear ")
        assert classify_background_check(record, TODAY)[0] is FieldStatus.COMPLETE

    def test_not_cleared_step_is_escalated(self):
        """The not-cleared state is surfaced, counted in total but not completed."""
        snapshot = SnapshotFactory.create(
            declaration=TwoPhaseField(submitted=True, reviewed=True),
            background_check=BackgroundCheckRecord(status="denied"),
        )

        progress = evaluate(required(background_check=True), snapshot, TODAY)
        step = progress.step_for(StepCategory.BACKGROUND_CHECK)

        assert step is not None
        assert step.background_check is not None
        assert step.background_check.needs_escalation is True
        assert step.background_check.outcome is BackgroundCheckOutcome.NOT_CLEARED
        assert step.description == NOT_CLEARED_DESCRIPTION
        assert progress.needs_escalation is True
        assert progress.completed == 1
        assert progress.total == 2

    def test_step_carries_record_details(self):
        record = clear(date(2027, 6, 1))
        snapshot = SnapshotFactory.create(background_check=record)

        step = evaluate(required(background_check=True), snapshot, TODAY).step_for(
            StepCategory.BACKGROUND_CHECK
        )

        assert step is not None
        assert step.background_check is not None
        assert step.background_check.status == "manual_clear"
        assert step.background_check.completed_at == record.completed_at
        assert step.background_check.expires_on == date(2027, 6, 1)

    def test_expired_step_re_offers_link(self):
        templates = StepTemplates(links={"background_check": "https://example.org/check"})
        snapshot = SnapshotFactory.create(background_check=clear(date(2024, 1, 1)))

        step = evaluate(
            required(background_check=True), snapshot, TODAY, templates=templates
        ).step_for(StepCategory.BACKGROUND_CHECK)

        assert step is not None
        assert step.status is FieldStatus.PENDING_USER
        assert step.link == "https://example.org/check"


class TestTraining:
    """Tests for time-bounded training steps."""

    def test_child_safety_exactly_two_years(self):
        field = TrainingField(submitted=True, last_completed=date(2023, 6, 15))
        assert training_status(field, 2, TODAY) is FieldStatus.COMPLETE

    def test_child_safety_one_day_older(self):
        field = TrainingField(submitted=True, last_completed=date(2023, 6, 14))
        assert training_status(field, 2, TODAY) is FieldStatus.PENDING_ADMIN

    def test_mandated_reporter_one_year_window(self):
        snapshot = SnapshotFactory.create(
            mandated_reporter=TrainingField(submitted=True, last_completed=date(2024, 6, 14)),
            child_safety=TrainingField(submitted=True, last_completed=date(2024, 6, 14)),
        )

        progress = evaluate(required(child_safety=True, mandated_reporter=True), snapshot, TODAY)

        assert progress.step_for(StepCategory.CHILD_SAFETY).status is FieldStatus.COMPLETE
        assert (
            progress.step_for(StepCategory.MANDATED_REPORTER).status is FieldStatus.PENDING_ADMIN
        )

    def test_not_submitted(self):
        assert training_status(TrainingField(), 2, TODAY) is FieldStatus.PENDING_USER

    def test_submitted_without_completion_date(self):
        field = TrainingField(submitted=True)
        assert training_status(field, 2, TODAY) is FieldStatus.PENDING_ADMIN

    def test_expired_and_not_resubmitted(self):
        field = TrainingField(last_completed=date(2020, 1, 1))
        assert training_status(field, 2, TODAY) is FieldStatus.PENDING_USER

    def test_policy_windows(self):
        """Validity windows come from the policy."""
        snapshot = SnapshotFactory.create(
            child_safety=TrainingField(submitted=True, last_completed=date(2022, 7, 1)),
        )
        policy = EvaluationPolicy(child_safety_years=3)

        progress = evaluate(required(child_safety=True), snapshot, TODAY, policy=policy)

        assert progress.completed == 1


class TestCovenant:
    """Tests for covenant tier selection."""

    def test_single_step_for_highest_tier(self):
        """Only the public presence step is emitted and only its flag is checked."""
        snapshot = SnapshotFactory.create(covenant_signed=True, moral_conduct_signed=True)

        progress = evaluate(
            required(covenant_tier=CovenantTier.PUBLIC_PRESENCE), snapshot, TODAY
        )

        covenant_steps = [s for s in progress.steps if s.category is StepCategory.COVENANT]
        assert len(covenant_steps) == 1
        assert covenant_steps[0].covenant_tier is CovenantTier.PUBLIC_PRESENCE
        assert covenant_steps[0].title == "Public Presence Policy"
        assert covenant_steps[0].status is FieldStatus.PENDING_USER

    def test_higher_form_alone_completes(self):
        snapshot = SnapshotFactory.create(public_presence_signed=True)

        progress = evaluate(
            required(covenant_tier=CovenantTier.PUBLIC_PRESENCE), snapshot, TODAY
        )

        assert progress.completed == 1

    @pytest.mark.parametrize(
        "tier,flag",
        [
            (CovenantTier.COVENANT, "covenant_signed"),
            (CovenantTier.MORAL_CONDUCT, "moral_conduct_signed"),
            (CovenantTier.PUBLIC_PRESENCE, "public_presence_signed"),
        ],
    )
    def test_each_tier_checks_its_flag(self, tier, flag):
        snapshot = SnapshotFactory.create(**{flag: True})
        progress = evaluate(required(covenant_tier=tier), snapshot, TODAY)
        assert progress.steps[0].status is FieldStatus.COMPLETE

    def test_no_covenant_step_without_tier(self):
        progress = evaluate(required(references=True), SnapshotFactory.create(), TODAY)
        assert progress.step_for(StepCategory.COVENANT) is None


class TestAdditionalRequirements:
    """Tests for the optional Welcome to RCC and Membership steps."""

    def test_hidden_by_default(self):
        progress = evaluate(
            required(welcome_to_rcc=True, membership=True), SnapshotFactory.create(), TODAY
        )
        assert progress.total == 0

    def test_shown_when_enabled(self):
        policy = EvaluationPolicy(include_additional_requirements=True)
        snapshot = SnapshotFactory.create(welcome_to_rcc=True, membership=None)

        progress = evaluate(
            required(welcome_to_rcc=True, membership=True, covenant_tier=CovenantTier.COVENANT),
            snapshot,
            TODAY,
            policy=policy,
        )

        assert [(s.category, s.status) for s in progress.steps] == [
            (StepCategory.COVENANT, FieldStatus.PENDING_USER),
            (StepCategory.WELCOME_TO_RCC, FieldStatus.COMPLETE),
            (StepCategory.MEMBERSHIP, FieldStatus.NOT_STARTED),
        ]
        assert progress.completed == 1
        assert progress.total == 3


class TestPurity:
    """Tests for deterministic evaluation."""

    def test_idempotent(self):
        evaluator = StepEvaluator()
        req = required(background_check=True, references=True, child_safety=True)
        snapshot = SnapshotFactory.create(
            declaration=TwoPhaseField(submitted=True),
            child_safety=TrainingField(submitted=True, last_completed=date(2024, 1, 1)),
        )

        assert evaluator.evaluate(req, snapshot, TODAY) == evaluator.evaluate(req, snapshot, TODAY)

    def test_depends_on_explicit_today(self):
        """The same snapshot can read complete or expired depending on today."""
        snapshot = SnapshotFactory.create(background_check=clear(date(2025, 6, 15)))
        req = required(background_check=True)

        assert evaluate(req, snapshot, date(2025, 6, 15)).steps[1].status is FieldStatus.COMPLETE
        assert (
            evaluate(req, snapshot, date(2025, 6, 16)).steps[1].status is FieldStatus.PENDING_USER
        )

    def test_templates_carried_through(self):
        templates = StepTemplates(links={"references": "https://example.org/references"})
        progress = evaluate(
            required(references=True), SnapshotFactory.create(), TODAY, templates=templates
        )

        assert progress.steps[0].title == "References"
        assert progress.steps[0].link == "https://example.org/references"

    def test_partial_templates_fall_back_to_defaults(self):
        """A custom map only replaces the categories it names."""
        templates = StepTemplates(
            templates={StepCategory.DECLARATION: StepTemplate(title="Sign Up", description="")},
            covenant_templates={
                CovenantTier.COVENANT: StepTemplate(title="Team Promise", description="")
            },
        )

        progress = evaluate(
            required(
                background_check=True,
                references=True,
                covenant_tier=CovenantTier.MORAL_CONDUCT,
            ),
            SnapshotFactory.create(),
            TODAY,
            templates=templates,
        )

        assert [s.title for s in progress.steps] == [
            "Sign Up",
            "Background Check",
            "References",
            "Moral Conduct Policy",
        ]
