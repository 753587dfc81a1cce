"""Enums for onboarding domain."""

from enum import Enum, IntEnum


class FieldStatus(str, Enum):
    """Completion classification shared by every onboarding step.

    The UI maps each value to an icon and color.
    """

    NOT_STARTED = "not_started"
    PENDING_USER = "pending_user"  # Volunteer still has to act
    PENDING_ADMIN = "pending_admin"  # Waiting on staff review or confirmation
    COMPLETE = "complete"


class CovenantTier(IntEnum):
    """Escalating conduct-agreement forms.

    A higher tier subsumes the lower ones: signing the tier 3 form also
    satisfies tiers 1 and 2.
    """

    NONE = 0
    COVENANT = 1
    MORAL_CONDUCT = 2
    PUBLIC_PRESENCE = 3


class StepCategory(str, Enum):
    """Compliance categories, in the order steps are shown."""

    DECLARATION = "declaration"
    BACKGROUND_CHECK = "background_check"
    CHILD_SAFETY = "child_safety"
    MANDATED_REPORTER = "mandated_reporter"
    REFERENCES = "references"
    COVENANT = "covenant"
    WELCOME_TO_RCC = "welcome_to_rcc"
    MEMBERSHIP = "membership"


class BackgroundCheckStatus(str, Enum):
    """Statuses reported by the background-check provider."""

    AWAITING_APPLICANT = "awaiting_applicant"
    REPORT_PROCESSING = "report_processing"
    NEEDS_REVIEW = "needs_review"
    PENDING_REVIEW = "pending_review"
    MANUAL_CLEAR = "manual_clear"
    COMPLETE_CLEAR = "complete_clear"
    MANUAL_NOT_CLEAR = "manual_not_clear"
    NOT_CLEAR = "not_clear"
    DENIED = "denied"


class BackgroundCheckOutcome(str, Enum):
    """What a background-check status means for the volunteer."""

    NOT_SUBMITTED = "not_submitted"
    IN_PROGRESS = "in_progress"  # Applicant still has to finish the provider form
    IN_REVIEW = "in_review"
    CLEARED = "cleared"
    EXPIRED = "expired"  # Cleared once, must be redone
    NOT_CLEARED = "not_cleared"  # Terminal failure, escalated to staff
    UNKNOWN = "unknown"  # Unrecognized provider status
