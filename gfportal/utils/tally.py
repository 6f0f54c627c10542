# Global Friendship Portal
# Copyright (C) 2025 Giovani per la Pace, Global Friendship organizing team
#
# This file is part of Global Friendship Portal and is dual-licensed:
#
# 1. Under the terms of the GNU Affero General Public License (AGPL) version 3,
#    as published by the Free Software Foundation. You may use, modify, and
#    distribute this file under those terms.
#
# 2. Under a commercial license, allowing use in closed-source or proprietary
#    environments without the obligations of the AGPL.
#
# If you have obtained this file under the AGPL, and you make it available over
# a network, you must also make the complete source code available under the same license.
#
# For more information or to purchase a commercial license, contact:
# info@giovaniperlapace.it
#
# SPDX-License-Identifier: AGPL-3.0-or-later OR Proprietary

"""Verification and normalization of Tally form submissions."""

import base64
import hashlib
import hmac
import logging
import re
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Optional

import pandas as pd
from django.conf import settings as conf_settings
from django.db import DatabaseError, IntegrityError, transaction

from gfportal.models.access import EventGroup
from gfportal.utils.fees import calc_nights, calc_stay_fee

logger = logging.getLogger(__name__)

SIGNATURE_HEADERS = ["tally-signature", "x-tally-signature", "tally-signature-v1"]

NAME_KEYS = ["Name/Nome/Nombre/Prenom", "Nome", "Name"]
SURNAME_KEYS = ["Surname / Cognome / Apellido / Nom de famille", "Cognome", "Surname"]
EMAIL_KEYS = ["e-mail", "Email", "email"]
NATIONALITY_KEYS = ["Nationality/Nazionalità/Nacionalidad/Nationalitè", "Nationality"]
RESIDENCE_KEYS = ["Country of residence / Paese di residenza / País de residencia / Pays de résidence"]
CITY_KEYS = ["City", "Città"]
ROME_GROUP_KEYS = ["Gruppo di Roma"]
DATE_RANGE_KEYS = ["Date of arrival and departure", "Date of arrival and departure "]
DEPARTURE_KEYS = ["Departure"]

# a dash only separates the range when surrounded by spaces, ISO dates contain dashes too
RANGE_SEPARATOR = re.compile(r"\s+-\s+|\s+to\s+", re.IGNORECASE)

ITALY_LABELS = {"italy", "italia"}


@dataclass
class TallySubmission:
    """Canonical fields extracted from a form submission."""

    name: str
    surname: str
    email: str
    nationality: str
    residence_country: str
    city: str
    group_code: str
    arrival: Optional[datetime]
    departure: Optional[datetime]
    nights: Optional[int]
    total_fee: Optional[int]
    submission_id: Optional[str]
    respondent_id: Optional[str]
    submitted_at: Optional[datetime]

    def missing_required(self) -> bool:
        return not self.email or not self.name or not self.surname

    def to_json(self) -> dict:
        data = asdict(self)
        for key in ("arrival", "departure", "submitted_at"):
            if data[key]:
                data[key] = data[key].isoformat()
        return data


def get_signature_header(headers) -> Optional[str]:
    for header in SIGNATURE_HEADERS:
        value = headers.get(header)
        if value:
            return value
    return None


def verify_signature(raw_body: bytes, signature_header: Optional[str]) -> bool:
    """Check the HMAC-SHA256 signature of a webhook delivery.

    Args:
        raw_body: Raw request body, as signed by the sender
        signature_header: Base64 digest, optionally prefixed with ``sha256=``

    Returns:
        True if the signature matches, or if no secret is configured
    """
    secret = conf_settings.TALLY_WEBHOOK_SECRET
    if not secret:
        return True

    if not signature_header:
        return False

    cleaned = signature_header.removeprefix("sha256=")
    expected = base64.b64encode(hmac.new(secret.encode(), raw_body, hashlib.sha256).digest()).decode()
    return hmac.compare_digest(cleaned.encode(), expected.encode())


def normalize(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(normalize(item) for item in value)
    return str(value).strip()


def extract_answers(payload: Any) -> dict[str, str]:
    """Flatten a submission into a label -> value dictionary.

    Form fields are read from ``data.fields`` (or a top level ``fields`` list)
    and keyed by label, then name, then key. Top level payload keys are added
    when they do not clash with a field label.
    """
    answers = {}
    if not isinstance(payload, dict):
        return answers

    data = payload.get("data")
    fields = data.get("fields") if isinstance(data, dict) else None
    if fields is None:
        fields = payload.get("fields")

    if isinstance(fields, list):
        for field in fields:
            if not isinstance(field, dict):
                continue
            label = normalize(field.get("label") or field.get("name") or field.get("key"))
            if label:
                answers[label] = normalize(field.get("value"))

    for key, value in payload.items():
        if key not in answers:
            answers[key] = normalize(value)

    return answers


def first_answer(answers: dict[str, str], keys: list[str]) -> str:
    for key in keys:
        if answers.get(key):
            return answers[key]
    return ""


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Leniently parse a date or datetime answer, returning None when unparsable.

    Timezone-aware values are converted to naive UTC so they can be compared.
    """
    if not value or not value.strip():
        return None

    parsed = pd.to_datetime(value.strip(), errors="coerce")
    if pd.isna(parsed):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert("UTC").tz_localize(None)
    return parsed.to_pydatetime()


def parse_arrival_departure(answers: dict[str, str]) -> tuple[Optional[datetime], Optional[datetime]]:
    """Read the stay range, falling back to the separate departure answer."""
    arrival = None
    departure = None

    date_range = first_answer(answers, DATE_RANGE_KEYS)
    if date_range:
        parts = [part.strip() for part in RANGE_SEPARATOR.split(date_range)]
        if len(parts) >= 2:
            arrival = parse_date(parts[0])
            departure = parse_date(parts[1])

    explicit_departure = first_answer(answers, DEPARTURE_KEYS)
    if not departure and explicit_departure:
        departure = parse_date(explicit_departure)

    return arrival, departure


def get_group_code(city: str, residence: str, rome_group: str) -> str:
    """Pick the group a registration belongs to.

    Rome registrations use their parish group, other Italian ones their city,
    foreign ones their country of residence.
    """
    if city.lower() == "roma":
        return rome_group
    if residence.lower() in ITALY_LABELS:
        return city
    return residence


def _payload_value(payload: dict, *keys: str) -> Optional[str]:
    data = payload.get("data")
    for source in (data if isinstance(data, dict) else {}, payload):
        for key in keys:
            if source.get(key):
                return str(source[key])
    return None


def normalize_submission(payload: dict) -> TallySubmission:
    """Map a raw submission payload onto the participant fields."""
    answers = extract_answers(payload)

    city = first_answer(answers, CITY_KEYS)
    residence = first_answer(answers, RESIDENCE_KEYS)
    arrival, departure = parse_arrival_departure(answers)
    nights = calc_nights(arrival, departure)
    fee = calc_stay_fee(nights)

    submitted_at = parse_date(_payload_value(payload, "createdAt"))
    if submitted_at:
        submitted_at = submitted_at.replace(tzinfo=timezone.utc)

    return TallySubmission(
        name=first_answer(answers, NAME_KEYS),
        surname=first_answer(answers, SURNAME_KEYS),
        email=first_answer(answers, EMAIL_KEYS),
        nationality=first_answer(answers, NATIONALITY_KEYS),
        residence_country=residence,
        city=city,
        group_code=get_group_code(city, residence, first_answer(answers, ROME_GROUP_KEYS)),
        arrival=arrival,
        departure=departure,
        nights=nights,
        total_fee=int(fee) if fee is not None else None,
        submission_id=_payload_value(payload, "submissionId", "responseId"),
        respondent_id=_payload_value(payload, "respondentId"),
        submitted_at=submitted_at,
    )


def resolve_group(code: str) -> Optional[EventGroup]:
    """Find or create the group for a submission; failures are logged and yield None.

    Lookup is by code first and, if creating by code fails, by name.
    """
    code = (code or "").strip()
    if not code:
        return None

    try:
        with transaction.atomic():
            group = EventGroup.objects.filter(code=code).first()
            if not group:
                group = EventGroup.objects.create(code=code, name=code)
            return group
    except (IntegrityError, DatabaseError) as code_error:
        logger.warning(f"Group lookup by code failed for {code}: {code_error}")

    try:
        with transaction.atomic():
            group = EventGroup.objects.filter(name=code).first()
            if not group:
                group = EventGroup.objects.create(code=f"{code}-{EventGroup.objects.count() + 1}", name=code)
            return group
    except (IntegrityError, DatabaseError) as name_error:
        logger.exception(f"Group lookup by name failed for {code}: {name_error}")
        return None
