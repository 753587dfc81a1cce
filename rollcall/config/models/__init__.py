"""Configuration model exports.

    from rollcall.config.models import OnboardingConfig, ObservabilityConfig
"""

from rollcall.config.models.observability import LoggingConfig, ObservabilityConfig
from rollcall.config.models.onboarding import OnboardingConfig

__all__ = [
    # Observability
    "LoggingConfig",
    "ObservabilityConfig",
    # Onboarding
    "OnboardingConfig",
]
