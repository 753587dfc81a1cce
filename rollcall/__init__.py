"""Rollcall: volunteer onboarding requirements and progress engine.

Resolves which compliance steps apply to a volunteer from the teams they
are joining, and evaluates each step's status from their directory record.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
