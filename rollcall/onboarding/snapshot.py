"""Build a PersonFieldSnapshot from upstream directory records.

The people directory stores onboarding state as custom fields: a list of
field definitions (id, name) and a list of field data (definition id,
value). Background checks come from a separate provider as a list of
records. Everything loosely typed is coerced here so the evaluator only
ever sees booleans, dates and string lists.
"""

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from rollcall.observability.logging import get_logger
from rollcall.onboarding.fields import (
    coerce_bool,
    coerce_optional_bool,
    parse_date,
    parse_datetime,
    parse_multi_select,
)
from rollcall.onboarding.models import (
    BackgroundCheckRecord,
    PersonFieldSnapshot,
    TrainingField,
    TwoPhaseField,
)

logger = get_logger(__name__)

# Snapshot attribute -> custom field name in the directory
DEFAULT_FIELD_NAMES: Mapping[str, str] = {
    "onboarding_in_progress_for": "Onboarding In Progress For",
    "onboarding_completed": "Onboarding Completed",
    "ministry_team_leader": "Ministry/Team Leader",
    "declaration_reviewed": "Declaration Reviewed",
    "declaration_submitted": "Declaration Submitted",
    "child_safety_completed": "Child Safety Training Last Completed",
    "child_safety_submitted": "Child Safety Training Submitted",
    "mandated_reporter_completed": "Mandated Reporter Training Last Completed",
    "mandated_reporter_submitted": "Mandated Reporter Training Submitted",
    "references_checked": "References Checked",
    "references_submitted": "References Submitted",
    "membership": "Membership",
    "welcome_to_rcc": "Welcome to RCC",
    "covenant_signed": "Covenant Signed",
    "moral_conduct": "Moral Conduct Policy Signed",
    "public_presence": "Public Presence Policy Signed",
}


class FieldDefinition(BaseModel):
    """A custom field definition in the directory."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str

    @classmethod
    def from_api(cls, item: Mapping[str, Any]) -> "FieldDefinition":
        """Accept a JSON:API resource or a flat dict."""
        attributes = item.get("attributes") or {}
        return cls(id=str(item["id"]), name=attributes.get("name", item.get("name", "")))


class FieldDatum(BaseModel):
    """A person's value for one custom field."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    field_definition_id: str
    value: Any = None

    @classmethod
    def from_api(cls, item: Mapping[str, Any]) -> "FieldDatum":
        """Accept a JSON:API resource or a flat dict."""
        attributes = item.get("attributes") or {}
        relationship = (item.get("relationships") or {}).get("field_definition") or {}
        definition_id = (relationship.get("data") or {}).get("id", item.get("field_definition_id"))
        return cls(
            field_definition_id=str(definition_id),
            value=attributes.get("value", item.get("value")),
        )


def resolve_field_values(
    definitions: Iterable[FieldDefinition | Mapping[str, Any]],
    data: Iterable[FieldDatum | Mapping[str, Any]],
) -> dict[str, Any]:
    """Join field data to definitions and key the values by field name.

    Data whose definition is missing is skipped rather than failing.
    """
    names: dict[str, str] = {}
    for definition in definitions:
        if not isinstance(definition, FieldDefinition):
            definition = FieldDefinition.from_api(definition)
        names[definition.id] = definition.name

    values: dict[str, Any] = {}
    for datum in data:
        if not isinstance(datum, FieldDatum):
            datum = FieldDatum.from_api(datum)
        name = names.get(datum.field_definition_id)
        if name is None:
            logger.debug("field_definition_missing", field_definition_id=datum.field_definition_id)
            continue
        values[name] = datum.value
    return values


def parse_background_check(raw: Mapping[str, Any]) -> BackgroundCheckRecord | None:
    """Normalize one provider record; records without a status are ignored."""
    status = raw.get("status")
    if not status:
        return None
    return BackgroundCheckRecord(
        status=str(status),
        completed_at=parse_datetime(raw.get("completed_at") or raw.get("completedAt")),
        expires_on=parse_date(raw.get("expires_on") or raw.get("expiresOn")),
    )


def _naive_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def latest_background_check(
    records: Iterable[BackgroundCheckRecord | Mapping[str, Any]],
) -> BackgroundCheckRecord | None:
    """Pick the record that describes the person's current state.

    Records are expected in chronological order. An undated record (still
    in progress) replaces the current pick; a dated one replaces it unless
    an earlier record carries a later completion time.
    """
    latest: BackgroundCheckRecord | None = None
    latest_at: datetime | None = None
    for raw in records:
        record = raw if isinstance(raw, BackgroundCheckRecord) else parse_background_check(raw)
        if record is None:
            continue
        completed_at = _naive_utc(record.completed_at)
        if completed_at is None:
            latest = record
        elif latest_at is None or completed_at >= latest_at:
            latest, latest_at = record, completed_at
    return latest


def build_snapshot(
    field_values: Mapping[str, Any],
    background_checks: Iterable[BackgroundCheckRecord | Mapping[str, Any]] = (),
    person_id: str | None = None,
    field_names: Mapping[str, str] | None = None,
) -> PersonFieldSnapshot:
    """Coerce raw directory values into a typed snapshot.

    Args:
        field_values: Values keyed by directory field name
            (see resolve_field_values)
        background_checks: Provider records, raw dicts or parsed
        person_id: Directory person id, carried through for logging
        field_names: Overrides for DEFAULT_FIELD_NAMES

    Returns:
        PersonFieldSnapshot; missing fields read as not submitted
    """
    names = {**DEFAULT_FIELD_NAMES, **(field_names or {})}

    def raw(attr: str) -> Any:
        return field_values.get(names[attr])

    return PersonFieldSnapshot(
        person_id=person_id,
        declaration=TwoPhaseField(
            submitted=coerce_bool(raw("declaration_submitted")),
            submitted_on=parse_date(raw("declaration_submitted")),
            reviewed=coerce_bool(raw("declaration_reviewed")),
            reviewed_on=parse_date(raw("declaration_reviewed")),
        ),
        references=TwoPhaseField(
            submitted=coerce_bool(raw("references_submitted")),
            submitted_on=parse_date(raw("references_submitted")),
            reviewed=coerce_bool(raw("references_checked")),
            reviewed_on=parse_date(raw("references_checked")),
        ),
        child_safety=TrainingField(
            submitted=coerce_bool(raw("child_safety_submitted")),
            submitted_on=parse_date(raw("child_safety_submitted")),
            last_completed=parse_date(raw("child_safety_completed")),
        ),
        mandated_reporter=TrainingField(
            submitted=coerce_bool(raw("mandated_reporter_submitted")),
            submitted_on=parse_date(raw("mandated_reporter_submitted")),
            last_completed=parse_date(raw("mandated_reporter_completed")),
        ),
        covenant_signed=coerce_bool(raw("covenant_signed")),
        moral_conduct_signed=coerce_bool(raw("moral_conduct")),
        public_presence_signed=coerce_bool(raw("public_presence")),
        welcome_to_rcc=coerce_optional_bool(raw("welcome_to_rcc")),
        membership=coerce_optional_bool(raw("membership")),
        background_check=latest_background_check(background_checks),
        onboarding_in_progress_for=parse_multi_select(raw("onboarding_in_progress_for")),
        onboarding_completed=parse_multi_select(raw("onboarding_completed")),
        ministry_team_leader=parse_multi_select(raw("ministry_team_leader")),
    )


class DirectoryRecord(BaseModel):
    """Field definitions, field data and background checks for one person."""

    person_id: str | None = None
    field_definitions: list[FieldDefinition] = Field(default_factory=list)
    field_data: list[FieldDatum] = Field(default_factory=list)
    background_checks: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def from_api(
        cls,
        payload: Mapping[str, Any],
        background_checks: Iterable[Mapping[str, Any]] = (),
        person_id: str | None = None,
    ) -> "DirectoryRecord":
        """Read a ``field_data?include=field_definition`` response body."""
        included = [
            FieldDefinition.from_api(item)
            for item in payload.get("included") or []
            if item.get("type", "FieldDefinition") == "FieldDefinition"
        ]
        data = [FieldDatum.from_api(item) for item in payload.get("data") or []]
        return cls(
            person_id=person_id,
            field_definitions=included,
            field_data=data,
            background_checks=[dict(record) for record in background_checks],
        )

    def to_snapshot(self, field_names: Mapping[str, str] | None = None) -> PersonFieldSnapshot:
        values = resolve_field_values(self.field_definitions, self.field_data)
        return build_snapshot(values, self.background_checks, self.person_id, field_names)
