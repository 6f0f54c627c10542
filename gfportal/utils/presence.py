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
from collections import Counter
from datetime import timedelta
from typing import Iterable, Optional

from gfportal.models.registration import Participant

PRESENCE_FILTERS = {"both", "organization", "autonomous"}

ORGANIZATION_MARKERS = [
    "provided by organization",
    "provided by the organization",
    "struttura fornita dall'organizzazione",
    "struttura fornita dall’organizzazione",
]

AUTONOMOUS_MARKERS = [
    "atonoumous",
    "autonomous",
    "alloggio autonomamente",
    "arranged my own accommodation",
]


def classify_accommodation(raw: Optional[str]) -> Optional[str]:
    """Classify a short or long accommodation label as 'organization' or 'autonomous'."""
    if not raw:
        return None
    value = raw.strip().lower()

    if value == "organization" or any(marker in value for marker in ORGANIZATION_MARKERS):
        return "organization"
    if any(marker in value for marker in AUTONOMOUS_MARKERS):
        return "autonomous"
    return None


def normalize_presence_filter(value: Optional[str]) -> str:
    value = (value or "").strip().lower()
    return value if value in PRESENCE_FILTERS else "both"


def daily_presence(participants: Iterable[Participant], accommodation: str = "both") -> list[dict]:
    """Count participants present on each day of the event.

    A participant counts once for every day from arrival to departure, both
    included; participants with incomplete or inverted dates are ignored.

    Args:
        participants: Participants to count
        accommodation: 'both', 'organization' or 'autonomous'; other values
            behave as 'both'

    Returns:
        List of ``{"day", "count"}`` sorted by day
    """
    accommodation = normalize_presence_filter(accommodation)
    counts = Counter()

    for participant in participants:
        if accommodation != "both":
            kind = classify_accommodation(participant.accommodation_short or participant.accommodation)
            if kind != accommodation:
                continue

        arrival = participant.arrival_date
        departure = participant.departure_date
        if not arrival or not departure or departure < arrival:
            continue

        current = arrival
        while current <= departure:
            counts[current.isoformat()] += 1
            current += timedelta(days=1)

    return [{"day": day, "count": counts[day]} for day in sorted(counts)]
