"""Onboarding engine configuration models."""

from pathlib import Path

from pydantic import BaseModel, Field

from rollcall.onboarding.models import EvaluationPolicy


class OnboardingConfig(BaseModel):
    """Onboarding requirements and evaluation configuration."""

    child_safety_years: int = Field(
        default=2, ge=1, description="Validity window for child safety training"
    )
    mandated_reporter_years: int = Field(
        default=1, ge=1, description="Validity window for mandated reporter training"
    )
    include_additional_requirements: bool = Field(
        default=False,
        description="Emit Welcome to RCC and Membership steps after the covenant",
    )
    team_matrix_path: Path | None = Field(
        default=None,
        description="TOML or JSON file replacing the packaged team matrix",
    )
    team_aliases: dict[str, str] = Field(
        default_factory=dict,
        description="Extra team renames, merged over the built-in alias table",
    )
    links: dict[str, str] = Field(
        default_factory=dict,
        description="External form links keyed by step category",
    )

    def policy(self) -> EvaluationPolicy:
        """Build the evaluator policy from this configuration."""
        return EvaluationPolicy(
            child_safety_years=self.child_safety_years,
            mandated_reporter_years=self.mandated_reporter_years,
            include_additional_requirements=self.include_additional_requirements,
        )
