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

"""Tests for the daily presence counts"""

from datetime import date

import pytest

from gfportal.models.registration import Participant
from gfportal.utils.participant import ACCOMMODATION_AUTONOMOUS, ACCOMMODATION_ORGANIZATION
from gfportal.utils.presence import classify_accommodation, daily_presence, normalize_presence_filter


def make(arrival, departure, accommodation=ACCOMMODATION_ORGANIZATION, short=None):
    return Participant(
        arrival_date=arrival, departure_date=departure, accommodation=accommodation, accommodation_short=short
    )


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Organization", "organization"),
        (ACCOMMODATION_ORGANIZATION, "organization"),
        ("Autonomous", "autonomous"),
        ("Atonoumous", "autonomous"),
        (ACCOMMODATION_AUTONOMOUS, "autonomous"),
        ("Hotel", None),
        (None, None),
    ],
)
def test_classify_accommodation(raw, expected):
    assert classify_accommodation(raw) == expected


def test_unknown_filter_means_both():
    assert normalize_presence_filter(" Autonomous ") == "autonomous"
    assert normalize_presence_filter("everyone") == "both"
    assert normalize_presence_filter(None) == "both"


def test_days_are_inclusive_and_sorted():
    participants = [
        make(date(2026, 8, 29), date(2026, 8, 31)),
        make(date(2026, 8, 27), date(2026, 8, 29)),
    ]

    assert daily_presence(participants) == [
        {"day": "2026-08-27", "count": 1},
        {"day": "2026-08-28", "count": 1},
        {"day": "2026-08-29", "count": 2},
        {"day": "2026-08-30", "count": 1},
        {"day": "2026-08-31", "count": 1},
    ]


def test_incomplete_or_inverted_stays_are_ignored():
    participants = [
        make(None, date(2026, 8, 30)),
        make(date(2026, 8, 30), date(2026, 8, 28)),
        make(date(2026, 8, 29), date(2026, 8, 29)),
    ]

    assert daily_presence(participants) == [{"day": "2026-08-29", "count": 1}]


def test_short_label_takes_precedence():
    participants = [
        make(date(2026, 8, 28), date(2026, 8, 28), accommodation=ACCOMMODATION_ORGANIZATION, short="Autonomous"),
        make(date(2026, 8, 28), date(2026, 8, 28), accommodation=None),
    ]

    assert daily_presence(participants, "autonomous") == [{"day": "2026-08-28", "count": 1}]
    assert daily_presence(participants, "organization") == []
    assert daily_presence(participants, "both") == [{"day": "2026-08-28", "count": 2}]
