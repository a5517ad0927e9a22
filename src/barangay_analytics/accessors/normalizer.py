"""Turns raw document-request and blotter payloads into domain records."""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Any, Iterable, List, Mapping, Optional

from barangay_analytics.domain.exceptions import RecordValidationError
from barangay_analytics.domain.models import Record, RecordKind, Status, SubjectSnapshot
from barangay_analytics.utils.timeutils import resolve_timezone, to_local

DEFAULT_TIMEZONE = "Asia/Manila"


class RecordNormalizer:
    """Maps stored JSON entries onto ``Record``.

    Effective status is resolved here, once, so every downstream component
    reads the same value. The subject snapshot is copied from the payload as
    it was stored with the record and never looked up again.
    """

    def __init__(self, timezone: tzinfo | str = DEFAULT_TIMEZONE) -> None:
        self._tz = resolve_timezone(timezone) if isinstance(timezone, str) else timezone

    def normalize(self, raw: Mapping[str, Any], kind: RecordKind) -> Record:
        if not isinstance(raw, Mapping):
            raise RecordValidationError(
                "Record payload must be an object", context={"type": type(raw).__name__}
            )
        if kind is RecordKind.REQUEST:
            return self.normalize_request(raw)
        return self.normalize_case(raw)

    def normalize_many(
        self, payloads: Iterable[Mapping[str, Any]], kind: RecordKind
    ) -> List[Record]:
        return [self.normalize(raw, kind) for raw in payloads]

    def normalize_request(self, raw: Mapping[str, Any]) -> Record:
        record_id = _record_id(raw, "requestId")
        status = Status.from_flags(
            declined=_flag(raw.get("decline")),
            approved=_flag(raw.get("approved")),
            verified=_flag(raw.get("verify")),
        )
        return Record(
            id=record_id,
            kind=RecordKind.REQUEST,
            created_at=self._created_at(raw, record_id, fallback="requestDate"),
            category=_clean(raw.get("documentType")),
            status=status,
            subject=_snapshot(raw.get("requestorInformation") or {}),
        )

    def normalize_case(self, raw: Mapping[str, Any]) -> Record:
        record_id = _record_id(raw, "caseNo")
        respondent = _party_info(raw, "respondents", "respondentInfo")
        return Record(
            id=record_id,
            kind=RecordKind.CASE,
            created_at=self._created_at(raw, record_id),
            category=_clean(raw.get("natureOfComplaint")),
            status=Status.from_label(raw.get("status")),
            subject=_snapshot(_party_info(raw, "complainants", "complainantInfo") or {}),
            respondent=_snapshot(respondent) if respondent is not None else None,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _created_at(
        self, raw: Mapping[str, Any], record_id: str, *, fallback: str | None = None
    ) -> datetime:
        value = raw.get("createdAt")
        if value is None and fallback is not None:
            value = raw.get(fallback)
        if value is None:
            raise RecordValidationError(
                "Record has no creation timestamp", context={"id": record_id}
            )
        return to_local(_parse_timestamp(value, record_id), self._tz)


def _record_id(raw: Mapping[str, Any], fallback_key: str) -> str:
    value = raw.get("_id") or raw.get("id") or raw.get(fallback_key)
    if isinstance(value, Mapping):
        value = value.get("$oid")
    if value is None or str(value).strip() == "":
        raise RecordValidationError("Record has no identifier", context={"keys": sorted(raw)})
    return str(value)


def _parse_timestamp(value: Any, record_id: str) -> datetime:
    if isinstance(value, Mapping) and "$date" in value:
        value = value["$date"]
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as exc:
            raise RecordValidationError(
                "Unparseable creation timestamp",
                context={"id": record_id, "value": value},
            ) from exc
    raise RecordValidationError(
        "Unsupported creation timestamp", context={"id": record_id, "value": value}
    )


def _flag(value: Any) -> bool:
    """Read a status flag stored either as ``{"status": bool}`` or a bare bool."""

    if isinstance(value, Mapping):
        value = value.get("status")
    return _truthy(value)


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "1"}
    return bool(value)


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _age(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value)
    text = str(value).strip()
    return int(text) if text.isdigit() else None


def _party_info(
    raw: Mapping[str, Any], parties_key: str, legacy_key: str
) -> Optional[Mapping[str, Any]]:
    """Attributes of the representative party of a case.

    A resident party with ``residentInfo`` wins, then the first listed party,
    then the legacy single-party field. Resident info overrides party fields.
    """

    parties = raw.get(parties_key)
    if isinstance(parties, list) and parties:
        party = next(
            (
                p
                for p in parties
                if isinstance(p, Mapping)
                and p.get("type") == "Resident"
                and isinstance(p.get("residentInfo"), Mapping)
            ),
            parties[0],
        )
        if not isinstance(party, Mapping):
            return None
        merged = dict(party)
        resident_info = party.get("residentInfo")
        if not isinstance(resident_info, Mapping):
            # Unpopulated references arrive as bare id strings.
            resident_info = {}
        merged.update({k: v for k, v in resident_info.items() if v is not None})
        return merged
    legacy = raw.get(legacy_key)
    return legacy if isinstance(legacy, Mapping) else None


def _snapshot(info: Mapping[str, Any]) -> SubjectSnapshot:
    return SubjectSnapshot(
        full_name=_clean(info.get("fullName") or info.get("name")),
        zone=_clean(info.get("purok")),
        age=_age(info.get("age")),
        gender=_clean(info.get("gender")),
        employment_status=_clean(info.get("workingStatus")),
        pwd=_truthy(info.get("pwd")),
        pwd_type=_clean(info.get("pwdType")),
        four_ps_beneficiary=_truthy(info.get("fourPsBeneficiary")),
        solo_parent=_truthy(info.get("soloParent")),
    )
