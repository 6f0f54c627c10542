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

"""Participant field options, partial-update validation and JSON rendering."""

import re
from datetime import date
from typing import Any, Optional

from gfportal.models.registration import Participant
from gfportal.utils.exceptions import ValidationApiError
from gfportal.utils.fees import parse_date_only

ARRIVAL_DATE_MIN = date(2026, 8, 27)
ARRIVAL_DATE_MAX = date(2026, 8, 29)
DEPARTURE_DATE_MIN = date(2026, 8, 29)
DEPARTURE_DATE_MAX = date(2026, 8, 31)

ACCOMMODATION_AUTONOMOUS = "I arranged my own accommodation / Ho trovato un alloggio autonomamente"
ACCOMMODATION_ORGANIZATION = (
    "I'm staying at the accommodation provided by the organization / "
    "Alloggero presso la struttura fornita dall'organizzazione"
)

ACCOMMODATION_OPTIONS = [ACCOMMODATION_AUTONOMOUS, ACCOMMODATION_ORGANIZATION]

# long label -> short label shown in tables and used by the fee rule
ACCOMMODATION_SHORT = {
    ACCOMMODATION_AUTONOMOUS: "Autonomous",
    ACCOMMODATION_ORGANIZATION: "Organization",
}

DIETARY_OPTIONS = [
    "Vegetarian",
    "Vegan",
    "I don't eat pork",
    "Other",
]

ACCESSIBILITY_OPTIONS = [
    "Difficulty seeing, even when wearing glasses",
    "Difficulty hearing, even when using a hearing aid",
    "Difficulty walking or climbing steps",
    "Difficulty with self-care (washing or dressing)",
    "Difficulty concentrating or remembering",
    "Difficulty communicating or being understood",
    "I use a wheelchair or mobility aid",
    "I need accessible accommodation",
    "I need assistance during the event",
]

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_text(value: Any) -> Optional[str]:
    """Return the trimmed string, or None for non-strings and blank values."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def normalize_email(value: Any) -> Optional[str]:
    value = normalize_text(value)
    return value.lower() if value else None


def is_valid_email(value: Optional[str]) -> bool:
    return bool(value and EMAIL_REGEX.match(value))


def accommodation_long_to_short(value: Optional[str]) -> Optional[str]:
    """Map a stored accommodation label to its short form.

    Unknown labels containing a recognisable keyword are still classified, as
    older submissions used slightly different wording.
    """
    if not value:
        return None
    if value in ACCOMMODATION_SHORT:
        return ACCOMMODATION_SHORT[value]

    lowered = value.strip().lower()
    if lowered in ("autonomous", "atonoumous", "organization"):
        return lowered.capitalize() if lowered != "atonoumous" else "Autonomous"
    if "arranged my own" in lowered or "autonomamente" in lowered:
        return "Autonomous"
    if "provided by the organization" in lowered or "fornita dall" in lowered:
        return "Organization"
    return None


def accommodation_short_to_long(value: Optional[str]) -> Optional[str]:
    """Accept either a long or a short accommodation label and return the long one."""
    if not value:
        return None
    if value in ACCOMMODATION_SHORT:
        return value

    lowered = value.strip().lower()
    for long_label, short_label in ACCOMMODATION_SHORT.items():
        if lowered == short_label.lower():
            return long_label
    if lowered == "atonoumous":
        return ACCOMMODATION_AUTONOMOUS
    return None


def accommodation_kind(participant: Participant) -> Optional[str]:
    """Return 'autonomous', 'organization' or None for a participant."""
    short = participant.accommodation_short or accommodation_long_to_short(participant.accommodation)
    return short.lower() if short else None


def _dedupe(items: list[str]) -> list[str]:
    seen = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


def normalize_option_list(value: Any, *, allow_string: bool = False) -> list[str]:
    """Normalize a list input, trimming entries and dropping blanks and duplicates.

    Args:
        value: The raw body value, usually a list of strings
        allow_string: Also accept a comma separated string

    Returns:
        The cleaned list of entries, in input order
    """
    if isinstance(value, list):
        return _dedupe([item.strip() for item in value if isinstance(item, str) and item.strip()])
    if allow_string and isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return []


def parse_stored_options(value: Optional[str], options: list[str]) -> list[str]:
    """Split a stored comma separated list, keeping only known options."""
    if not value:
        return []
    allowed = set(options)
    return [item.strip() for item in value.split(",") if item.strip() and item.strip() in allowed]


def join_options(values: list[str]) -> Optional[str]:
    return ", ".join(values) if values else None


def _validate_window(field: str, value: Optional[date], minimum: date, maximum: date) -> None:
    if value and not minimum <= value <= maximum:
        raise ValidationApiError(f"{field} must be between {minimum.isoformat()} and {maximum.isoformat()}")


def _date_input(body: dict, key: str, current: Optional[date]) -> tuple[Optional[date], bool]:
    """Read a date field from the body, keeping the current value when absent.

    Returns:
        The parsed date and whether the supplied value was malformed
    """
    if key not in body:
        return current, False
    raw = normalize_text(body.get(key))
    if not raw:
        return None, False
    parsed = parse_date_only(raw)
    return parsed, parsed is None


def _check_date_format(field: str, invalid: bool) -> None:
    if invalid:
        raise ValidationApiError(f"{field} must be in YYYY-MM-DD format")


def apply_participant_update(participant: Participant, body: dict, *, allow_email: bool = True) -> Participant:
    """Validate a partial update and save it on the participant.

    Every field absent from the body keeps its current value. Validation follows
    a fixed order so that the first failing rule determines the error message.

    Args:
        participant: Participant to update
        body: Decoded JSON request body
        allow_email: Whether the email can be changed (staff editors) or is
            locked to the session identity (self service)

    Returns:
        The saved participant, with calculated fields refreshed

    Raises:
        ValidationApiError: If any field fails validation
    """
    name = normalize_text(body["name"]) if "name" in body else normalize_text(participant.name)
    surname = normalize_text(body["surname"]) if "surname" in body else normalize_text(participant.surname)
    nationality = normalize_text(body["nationality"]) if "nationality" in body else participant.nationality

    if allow_email:
        email = normalize_email(body["email"]) if "email" in body else normalize_email(participant.email)
        phone = normalize_text(body["phone"]) if "phone" in body else normalize_text(participant.phone)
    else:
        email = participant.email
        phone = participant.phone

    birth_date, birth_invalid = _date_input(body, "birth_date", participant.birth_date)
    arrival_date, arrival_invalid = _date_input(body, "arrival_date", participant.arrival_date)
    departure_date, departure_invalid = _date_input(body, "departure_date", participant.departure_date)

    if "accommodation" in body:
        accommodation_input = normalize_text(body["accommodation"])
    else:
        accommodation_input = participant.accommodation
    accommodation = accommodation_short_to_long(accommodation_input)

    allergies = normalize_text(body["allergies"]) if "allergies" in body else participant.allergies

    if "dietary_needs" in body:
        dietary = normalize_option_list(body["dietary_needs"], allow_string=True)
    else:
        dietary = parse_stored_options(participant.dietary_needs, DIETARY_OPTIONS)

    if isinstance(body.get("accessibility_needs"), bool):
        accessibility_needs = body["accessibility_needs"]
    else:
        accessibility_needs = bool(participant.accessibility_needs)

    if "accessibility_details" in body:
        accessibility = normalize_option_list(body["accessibility_details"])
    else:
        accessibility = parse_stored_options(participant.accessibility_details, ACCESSIBILITY_OPTIONS)

    if not name or not surname:
        raise ValidationApiError("name and surname are required")

    if allow_email:
        if not email:
            raise ValidationApiError("email is required")
        if not is_valid_email(email):
            raise ValidationApiError("email is invalid")

    _check_date_format("birth_date", birth_invalid)
    _check_date_format("arrival_date", arrival_invalid)
    _check_date_format("departure_date", departure_invalid)

    _validate_window("arrival_date", arrival_date, ARRIVAL_DATE_MIN, ARRIVAL_DATE_MAX)
    _validate_window("departure_date", departure_date, DEPARTURE_DATE_MIN, DEPARTURE_DATE_MAX)

    if arrival_date and departure_date and departure_date < arrival_date:
        raise ValidationApiError("departure_date must be on or after arrival_date")

    if accommodation_input and not accommodation:
        raise ValidationApiError("Invalid accommodation value")

    if any(item not in DIETARY_OPTIONS for item in dietary):
        raise ValidationApiError("Invalid dietary_needs value")

    if any(item not in ACCESSIBILITY_OPTIONS for item in accessibility):
        raise ValidationApiError("Invalid accessibility_details value")

    if not accessibility_needs:
        accessibility = []

    participant.name = name
    participant.surname = surname
    participant.nationality = nationality
    participant.email = email
    participant.phone = phone
    participant.birth_date = birth_date
    participant.arrival_date = arrival_date
    participant.departure_date = departure_date
    participant.accommodation = accommodation
    participant.allergies = allergies
    participant.dietary_needs = join_options(dietary)
    participant.accessibility_needs = accessibility_needs
    participant.accessibility_details = join_options(accessibility)
    # calculated fields are refreshed by the pre_save signal
    participant.save()
    return participant


PARTICIPANT_FIELDS = [
    "id",
    "name",
    "surname",
    "residence_country",
    "nationality",
    "email",
    "phone",
    "birth_date",
    "arrival_date",
    "departure_date",
    "allergies",
    "accessibility_needs",
    "total_fee",
    "group_label",
]

FEE_FIELDS = [
    "id",
    "name",
    "surname",
    "arrival_date",
    "departure_date",
    "total_fee",
    "fee_paid",
    "group_label",
]

SELF_SERVICE_FIELDS = [
    "id",
    "email",
    "name",
    "surname",
    "group_label",
    "tally_submission_id",
    "nationality",
    "birth_date",
    "arrival_date",
    "departure_date",
    "accommodation",
    "allergies",
    "accessibility_needs",
    "submitted_at",
]


def _group_code(participant: Participant) -> Optional[str]:
    return participant.group.code if participant.group_id else None


def participant_to_json(participant: Participant) -> dict:
    """Render a participant row as returned by the staff participant tables."""
    data = participant.as_dict(fields=PARTICIPANT_FIELDS)
    data["group_id"] = _group_code(participant)
    data["accommodation"] = participant.accommodation_short or accommodation_long_to_short(participant.accommodation)
    data["accommodation_short"] = participant.accommodation_short
    data["group"] = participant.group_display()
    data["dietary_needs"] = parse_stored_options(participant.dietary_needs, DIETARY_OPTIONS)
    data["accessibility_details"] = parse_stored_options(participant.accessibility_details, ACCESSIBILITY_OPTIONS)
    return data


def fee_row_to_json(participant: Participant) -> dict:
    data = participant.as_dict(fields=FEE_FIELDS)
    data["group_id"] = _group_code(participant)
    data["accommodation"] = participant.accommodation_short or accommodation_long_to_short(participant.accommodation)
    data["group"] = participant.group_display()
    return data


def self_service_to_json(participant: Participant) -> dict:
    data = participant.as_dict(fields=SELF_SERVICE_FIELDS)
    data["group_id"] = _group_code(participant)
    data["dietary_needs"] = parse_stored_options(participant.dietary_needs, DIETARY_OPTIONS)
    data["accessibility_details"] = parse_stored_options(participant.accessibility_details, ACCESSIBILITY_OPTIONS)
    return data


def participant_candidate(participant: Participant) -> dict:
    """Minimal description used when a user must pick among several registrations."""
    data = participant.as_dict(fields=["id", "name", "surname", "group_label", "submitted_at"])
    data["group_id"] = _group_code(participant)
    return data


def sort_participants(participants) -> list[Participant]:
    """Sort participants by surname then name, case-insensitively."""
    return sorted(participants, key=lambda p: ((p.surname or "").lower(), (p.name or "").lower()))


def group_labels(participants: list[Participant]) -> list[str]:
    """Return the sorted distinct group labels, excluding the '-' placeholder."""
    return sorted({p.group_display() for p in participants} - {"-"})
