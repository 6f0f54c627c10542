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

"""Stay length, participation fee and age computations for participants."""

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

EVENT_DATE = date(2026, 8, 28)

FEE_SHORT_STAY = Decimal("200")
FEE_LONG_STAY = Decimal("235")
FEE_AUTONOMOUS = Decimal("100")

# nights from which the long stay fee applies
LONG_STAY_NIGHTS = 4

ADULT_AGE = 18

# "atonoumous" is a misspelling found in historical form data
AUTONOMOUS_LABELS = {"autonomous", "atonoumous"}


def calc_nights(arrival: Any, departure: Any) -> Optional[int]:
    """Compute the number of nights between arrival and departure.

    Accepts plain dates as well as datetimes; for datetimes partial days are
    rounded up, as a stay ending at noon still uses the bed for that night.

    Args:
        arrival: Arrival date or datetime
        departure: Departure date or datetime

    Returns:
        Number of nights, or None if either date is missing or departure is not
        after arrival
    """
    if not arrival or not departure:
        return None

    if isinstance(arrival, datetime) and isinstance(departure, datetime):
        seconds = (departure - arrival).total_seconds()
        if seconds <= 0:
            return None
        return math.ceil(seconds / 86400)

    arrival = arrival.date() if isinstance(arrival, datetime) else arrival
    departure = departure.date() if isinstance(departure, datetime) else departure
    nights = (departure - arrival).days
    if nights <= 0:
        return None
    return nights


def is_autonomous(accommodation_short: Optional[str]) -> bool:
    return (accommodation_short or "").strip().lower() in AUTONOMOUS_LABELS


def calc_stay_fee(nights: Optional[int]) -> Optional[Decimal]:
    """Two-tier fee used when only the stay length is known."""
    if nights is None:
        return None
    return FEE_LONG_STAY if nights >= LONG_STAY_NIGHTS else FEE_SHORT_STAY


def calc_total_fee(nights: Optional[int], accommodation_short: Optional[str] = None) -> Optional[Decimal]:
    """Compute the total participation fee.

    Participants arranging their own accommodation pay a flat fee regardless of
    their stay; everybody else pays by stay length.

    Args:
        nights: Number of nights, as returned by calc_nights
        accommodation_short: Short accommodation label

    Returns:
        The fee, or None when it cannot be determined yet
    """
    if is_autonomous(accommodation_short):
        return FEE_AUTONOMOUS
    return calc_stay_fee(nights)


def parse_date_only(value: Any) -> Optional[date]:
    """Parse a strict ``YYYY-MM-DD`` value, returning None when it does not match."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    value = value.strip()
    if len(value) != 10 or value[4] != "-" or value[7] != "-":
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def calc_age_at_event(birth_date: Any, event_date: date = EVENT_DATE) -> Optional[int]:
    """Compute age in full years on the event date.

    Args:
        birth_date: Birth date, as a date or ``YYYY-MM-DD`` string
        event_date: Reference date, defaults to the event start

    Returns:
        Age in years, or None when the birth date is missing, unparsable or
        after the event date
    """
    birth = parse_date_only(birth_date)
    if not birth or event_date < birth:
        return None

    age = event_date.year - birth.year
    # not yet had the birthday in the event year
    if (event_date.month, event_date.day) < (birth.month, birth.day):
        age -= 1
    return age


def calc_is_minor(age: Optional[int]) -> Optional[bool]:
    if age is None:
        return None
    return age < ADULT_AGE


def update_calculated_fields(participant) -> None:
    """Refresh the derived stay, fee and age fields of a participant in place."""
    participant.nights = calc_nights(
        parse_date_only(participant.arrival_date), parse_date_only(participant.departure_date)
    )
    participant.total_fee = calc_total_fee(participant.nights, participant.accommodation_short)
    participant.age = calc_age_at_event(participant.birth_date)
    participant.is_minor = calc_is_minor(participant.age)
