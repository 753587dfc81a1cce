"""Team requirements matrix loading.

The packaged matrix holds the default requirements for every known team.
Admins can override individual teams; an override replaces the team's
default entry completely rather than merging field by field.
"""

import json
import tomllib
from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from rollcall.observability.logging import get_logger
from rollcall.onboarding.models import TeamKey, TeamRequirements
from rollcall.onboarding.teams import normalize_team_name

logger = get_logger(__name__)

DEFAULT_MATRIX_RESOURCE = "team_matrix.toml"


class TeamMatrixError(Exception):
    """A team matrix entry could not be read as TeamRequirements."""

    def __init__(self, team: str, message: str) -> None:
        self.team = team
        self.message = message
        super().__init__(f"Invalid requirements for team {team!r}: {message}")


def parse_team_table(raw: Mapping[str, Any]) -> dict[TeamKey, TeamRequirements]:
    """Validate a ``{team: {flag: bool}}`` mapping.

    Accepts either the bare mapping or one nested under a ``teams`` key.
    Team keys are normalized; alias resolution is not applied so that an
    entry can be stored under its own name.

    Raises:
        TeamMatrixError: If an entry is not a table or has bad flags
    """
    teams = raw.get("teams", raw)
    table: dict[TeamKey, TeamRequirements] = {}
    for team, entry in teams.items():
        if not isinstance(entry, Mapping):
            raise TeamMatrixError(team, "expected a table of requirement flags")
        try:
            table[normalize_team_name(team, aliases={})] = TeamRequirements.model_validate(entry)
        except ValidationError as e:
            raise TeamMatrixError(team, str(e)) from e
    return table


def load_default_team_table() -> dict[TeamKey, TeamRequirements]:
    """Load the matrix packaged with rollcall."""
    source = resources.files("rollcall.onboarding.data").joinpath(DEFAULT_MATRIX_RESOURCE)
    with source.open("rb") as f:
        table = parse_team_table(tomllib.load(f))

    logger.debug("team_matrix_loaded", source="package", team_count=len(table))
    return table


def load_team_table(path: Path) -> dict[TeamKey, TeamRequirements]:
    """Load a team matrix from a TOML or JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If TOML syntax is invalid
        json.JSONDecodeError: If JSON syntax is invalid
        TeamMatrixError: If an entry is invalid
    """
    if not path.exists():
        raise FileNotFoundError(f"Team matrix not found: {path}")

    if path.suffix.lower() == ".json":
        raw = json.loads(path.read_text(encoding="utf-8"))
    else:
        with path.open("rb") as f:
            raw = tomllib.load(f)

    table = parse_team_table(raw)
    logger.info("team_matrix_loaded", source=str(path), team_count=len(table))
    return table


def apply_overrides(
    defaults: Mapping[TeamKey, TeamRequirements],
    overrides: Mapping[str, TeamRequirements | Mapping[str, Any]],
) -> dict[TeamKey, TeamRequirements]:
    """Layer admin overrides on top of the default matrix.

    Each overridden team replaces its default entry entirely; flags left
    out of an override are False, not inherited.

    Raises:
        TeamMatrixError: If a raw override entry is invalid
    """
    table = dict(defaults)
    for team, entry in overrides.items():
        key = normalize_team_name(team, aliases={})
        if isinstance(entry, TeamRequirements):
            table[key] = entry
        else:
            table.update(parse_team_table({key: entry}))
    return table
