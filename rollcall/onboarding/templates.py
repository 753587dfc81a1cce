"""Static content for onboarding steps."""

from collections.abc import Mapping

from rollcall.onboarding.enums import CovenantTier, StepCategory
from rollcall.onboarding.models import StepTemplate

DEFAULT_TEMPLATES: Mapping[StepCategory, StepTemplate] = {
    StepCategory.DECLARATION: StepTemplate(
        title="Declaration",
        description=(
            "Complete the volunteer declaration form. It is required before "
            "your background check can begin."
        ),
    ),
    StepCategory.BACKGROUND_CHECK: StepTemplate(
        title="Background Check",
        description=(
            "Submit your background check through our screening provider. "
            "Clearances must be renewed when they expire."
        ),
    ),
    StepCategory.CHILD_SAFETY: StepTemplate(
        title="Child Safety Training",
        description="Complete child safety training. Valid for two years.",
    ),
    StepCategory.MANDATED_REPORTER: StepTemplate(
        title="Mandated Reporter Training",
        description="Complete mandated reporter training. Valid for one year.",
    ),
    StepCategory.REFERENCES: StepTemplate(
        title="References",
        description="Provide three references who can speak to your character.",
    ),
    StepCategory.WELCOME_TO_RCC: StepTemplate(
        title="Welcome to RCC",
        description="Attend a Welcome to RCC session.",
    ),
    StepCategory.MEMBERSHIP: StepTemplate(
        title="Membership",
        description="Become a member of the church.",
    ),
}

COVENANT_TEMPLATES: Mapping[CovenantTier, StepTemplate] = {
    CovenantTier.COVENANT: StepTemplate(
        title="Volunteer Covenant",
        description="Read and sign the volunteer covenant.",
    ),
    CovenantTier.MORAL_CONDUCT: StepTemplate(
        title="Moral Conduct Policy",
        description=(
            "Read and sign the moral conduct policy. It includes the "
            "volunteer covenant."
        ),
    ),
    CovenantTier.PUBLIC_PRESENCE: StepTemplate(
        title="Public Presence Policy",
        description=(
            "Read and sign the public presence policy. It includes the moral "
            "conduct policy and the volunteer covenant."
        ),
    ),
}

NOT_CLEARED_DESCRIPTION = (
    "Your background check could not be cleared. A staff member will contact "
    "you; please reach out to the volunteer office with any questions."
)

EXPIRED_DESCRIPTION = (
    "Your background check clearance has expired. Please submit a new "
    "background check."
)


class StepTemplates:
    """Template lookup with optional per-category link overrides.

    Custom templates are layered over the defaults, so a partial map only
    replaces the categories it names.
    """

    def __init__(
        self,
        templates: Mapping[StepCategory, StepTemplate] | None = None,
        covenant_templates: Mapping[CovenantTier, StepTemplate] | None = None,
        links: Mapping[str, str] | None = None,
    ) -> None:
        self._templates = {**DEFAULT_TEMPLATES, **(templates or {})}
        self._covenant = {**COVENANT_TEMPLATES, **(covenant_templates or {})}
        self._links = {StepCategory(key): url for key, url in (links or {}).items()}

    def for_category(self, category: StepCategory) -> StepTemplate:
        return self._with_link(category, self._templates[category])

    def for_covenant(self, tier: CovenantTier) -> StepTemplate:
        return self._with_link(StepCategory.COVENANT, self._covenant[tier])

    def _with_link(self, category: StepCategory, template: StepTemplate) -> StepTemplate:
        link = self._links.get(category)
        if link is None:
            return template
        return template.model_copy(update={"link": link})
