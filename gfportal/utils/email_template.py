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

"""Placeholder rendering for campaign templates addressed to participants and group leaders."""

import html
import re
from typing import Callable, Optional

from gfportal.models.access import Profile
from gfportal.models.registration import Participant
from gfportal.utils.participant import (
    ACCESSIBILITY_OPTIONS,
    DIETARY_OPTIONS,
    accommodation_long_to_short,
    parse_stored_options,
)

TOKEN_PATTERN = re.compile(r"\{\{\s*([a-zA-Z0-9_]+)\s*\}\}")

PARTICIPANT_TEMPLATE_FIELDS = [
    ("full_name", "Full name"),
    ("name", "Name"),
    ("surname", "Surname"),
    ("id", "Id"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("nationality", "Country"),
    ("birth_date", "Date of birth"),
    ("arrival_date", "Date of arrival"),
    ("departure_date", "Date of departure"),
    ("accommodation", "Accommodation"),
    ("group", "Group"),
    ("allergies", "Allergies"),
    ("dietary_needs", "Dietary requirements"),
    ("accessibility_needs", "Accessibility support needed"),
    ("accessibility_details", "Accessibility details"),
    ("total_fee", "Total fee"),
]

GROUP_LEADER_TEMPLATE_FIELDS = [
    ("full_name", "Full name"),
    ("name", "Name"),
    ("surname", "Surname"),
    ("id", "Id"),
    ("email", "Email"),
    ("phone", "Phone"),
    ("role", "Role"),
    ("groups", "Groups"),
    ("italy", "Based in Italy"),
    ("rome", "Based in Rome"),
]


def _clean(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _yes_no(value: Optional[bool]) -> str:
    if value is None:
        return ""
    return "Yes" if value else "No"


def _full_name(name: str, surname: str) -> str:
    return " ".join(part for part in (name, surname) if part)


def _format_fee(value) -> str:
    if value is None:
        return ""
    # 235.00 -> 235, 12.50 -> 12.5
    return format(value.normalize(), "f") if hasattr(value, "normalize") else str(value)


def build_participant_template_map(participant: Participant) -> dict[str, str]:
    name = _clean(participant.name)
    surname = _clean(participant.surname)
    return {
        "full_name": _full_name(name, surname),
        "name": name,
        "surname": surname,
        "id": _clean(participant.id),
        "email": _clean(participant.email),
        "phone": _clean(participant.phone),
        "nationality": _clean(participant.nationality),
        "birth_date": _clean(participant.birth_date),
        "arrival_date": _clean(participant.arrival_date),
        "departure_date": _clean(participant.departure_date),
        "accommodation": _clean(participant.accommodation_short or accommodation_long_to_short(participant.accommodation)),
        "group": participant.group_display(),
        "allergies": _clean(participant.allergies),
        "dietary_needs": ", ".join(parse_stored_options(participant.dietary_needs, DIETARY_OPTIONS)),
        "accessibility_needs": _yes_no(participant.accessibility_needs),
        "accessibility_details": ", ".join(
            parse_stored_options(participant.accessibility_details, ACCESSIBILITY_OPTIONS)
        ),
        "total_fee": _format_fee(participant.total_fee),
    }


def build_group_leader_template_map(profile: Profile) -> dict[str, str]:
    name = _clean(profile.name)
    surname = _clean(profile.surname)
    return {
        "full_name": _full_name(name, surname),
        "name": name,
        "surname": surname,
        "id": _clean(profile.id),
        "email": _clean(profile.email),
        "phone": _clean(profile.phone),
        "role": _clean(profile.role),
        "groups": ", ".join(profile.group_codes()),
        "italy": _yes_no(profile.italy),
        "rome": _yes_no(profile.rome),
    }


def render_template(template: str, values: dict[str, str], transform: Callable[[str], str]) -> str:
    """Replace every ``{{ key }}`` token with its transformed value; unknown keys render empty."""
    return TOKEN_PATTERN.sub(lambda match: transform(values.get(match.group(1), "")), template or "")


def render_text(template: str, values: dict[str, str]) -> str:
    return render_template(template, values, lambda value: value)


def render_html(template: str, values: dict[str, str]) -> str:
    return render_template(template, values, lambda value: html.escape(value, quote=True))


def html_to_text(value: str) -> str:
    """Convert a template HTML body into a readable plain text alternative."""
    value = re.sub(r"<\s*br\s*/?>", "\n", value, flags=re.IGNORECASE)
    value = re.sub(r"</\s*(p|div|li|h[1-6])\s*>", "\n", value, flags=re.IGNORECASE)
    value = re.sub(r"<[^>]+>", " ", value)
    # single pass, so "&amp;lt;" stays "&lt;"
    value = html.unescape(value).replace("\xa0", " ")
    value = "\n".join(re.sub(r"[ \t]{2,}", " ", line).strip() for line in value.split("\n"))
    value = re.sub(r"\n{3,}", "\n\n", value)
    return value.strip()
