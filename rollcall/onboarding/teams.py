"""Team-name normalization and display helpers.

Team labels arrive as free text from the directory ("Kids Check In",
"Care Ministry"). Requirement lookups use normalized keys: lowercase,
dash-separated, with historical renames resolved through an alias table.
"""

import re
from collections.abc import Mapping

from rollcall.onboarding.models import TeamKey

_WHITESPACE = re.compile(r"\s+")

# Historical renames and serve-page ids that share another team's requirements
DEFAULT_TEAM_ALIASES: Mapping[str, TeamKey] = {
    "care-ministry": "care",
    "communion": "communion-team",
    "five6": "students",
    "reach": "students",
    "grow": "students",
}

_DISPLAY_NAMES: Mapping[TeamKey, str] = {
    "rpk": "RPK",
    "staff": "Staff",
    "e3-(thursday-night-kids)": "E3 (Thursday Night Kids)",
}


def _slug(label: str) -> str:
    return _WHITESPACE.sub("-", label.strip().lower())


def normalize_team_name(
    label: str,
    aliases: Mapping[str, TeamKey] | None = None,
) -> TeamKey:
    """Normalize a team label to its requirement-table key.

    Unknown labels pass through normalized but unresolved. Alias chains
    ("care-ministry" -> "care" -> "pastoral-care") are followed to the end;
    a cycle stops at the last key before it repeats.

    Args:
        label: Raw team label, e.g. "Care Ministry"
        aliases: Alias table keyed by normalized label; defaults to
            DEFAULT_TEAM_ALIASES. Use merged_aliases to build one from
            configuration.

    Returns:
        Normalized team key, e.g. "care"
    """
    key = _slug(label)
    table = DEFAULT_TEAM_ALIASES if aliases is None else aliases
    seen = {key}
    while True:
        target = table.get(key)
        if not target:
            return key
        target = _slug(target)
        if target in seen:
            return key
        seen.add(target)
        key = target


def merged_aliases(extra: Mapping[str, str] | None) -> dict[str, TeamKey]:
    """Built-in aliases with configured ones layered on top."""
    aliases = dict(DEFAULT_TEAM_ALIASES)
    for alias, target in (extra or {}).items():
        aliases[_slug(alias)] = _slug(target)
    return aliases


def team_display_name(key: TeamKey) -> str:
    """Title-case a team key for display ("kids-check-in" -> "Kids Check In")."""
    special = _DISPLAY_NAMES.get(key.lower())
    if special:
        return special
    return " ".join(word[:1].upper() + word[1:] for word in key.split("-") if word)


def is_known_team(
    label: str,
    team_table: Mapping[TeamKey, object],
    aliases: Mapping[str, TeamKey] | None = None,
) -> bool:
    """Whether a label resolves to an entry in the requirements table."""
    return normalize_team_name(label, aliases) in team_table
