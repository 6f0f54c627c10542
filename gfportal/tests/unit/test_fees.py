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

"""Tests for stay length, fee and age computations"""

from datetime import date, datetime
from decimal import Decimal

from gfportal.tests.unit.base import BaseTestCase
from gfportal.utils.fees import (
    FEE_AUTONOMOUS,
    FEE_LONG_STAY,
    FEE_SHORT_STAY,
    calc_age_at_event,
    calc_is_minor,
    calc_nights,
    calc_total_fee,
    parse_date_only,
)
from gfportal.utils.participant import ACCOMMODATION_AUTONOMOUS


class TestCalcNights:
    def test_dates(self):
        assert calc_nights(date(2026, 8, 27), date(2026, 8, 30)) == 3

    def test_partial_day_rounds_up(self):
        assert calc_nights(datetime(2026, 8, 27, 18, 0), datetime(2026, 8, 30, 10, 0)) == 3

    def test_missing_or_inverted(self):
        assert calc_nights(None, date(2026, 8, 30)) is None
        assert calc_nights(date(2026, 8, 30), date(2026, 8, 30)) is None
        assert calc_nights(date(2026, 8, 30), date(2026, 8, 28)) is None


class TestCalcTotalFee:
    def test_short_stay(self):
        assert calc_total_fee(3) == FEE_SHORT_STAY == Decimal("200")

    def test_long_stay_from_four_nights(self):
        assert calc_total_fee(4) == FEE_LONG_STAY == Decimal("235")

    def test_autonomous_is_flat(self):
        assert calc_total_fee(None, "Autonomous") == FEE_AUTONOMOUS
        assert calc_total_fee(2, "atonoumous") == FEE_AUTONOMOUS

    def test_unknown_stay(self):
        assert calc_total_fee(None, "Organization") is None


class TestAge:
    def test_birthday_before_event(self):
        assert calc_age_at_event("2000-01-15") == 26

    def test_birthday_after_event_date(self):
        assert calc_age_at_event(date(2008, 8, 29)) == 17
        assert calc_age_at_event(date(2008, 8, 28)) == 18

    def test_invalid_values(self):
        assert calc_age_at_event("15/01/2000") is None
        assert calc_age_at_event("2030-01-01") is None
        assert calc_age_at_event(None) is None

    def test_is_minor(self):
        assert calc_is_minor(17) is True
        assert calc_is_minor(18) is False
        assert calc_is_minor(None) is None

    def test_parse_date_only_is_strict(self):
        assert parse_date_only("2026-08-27") == date(2026, 8, 27)
        assert parse_date_only("2026-8-27") is None
        assert parse_date_only("2026-02-30") is None


class TestCalculatedFieldsOnSave(BaseTestCase):
    def test_fields_computed_on_create(self):
        participant = self.create_participant(birth_date=date(2010, 5, 1))

        participant.refresh_from_db()
        assert participant.nights == 3
        assert participant.total_fee == Decimal("200")
        assert participant.accommodation_short == "Organization"
        assert participant.age == 16
        assert participant.is_minor is True

    def test_fields_refreshed_on_update(self):
        participant = self.create_participant()

        participant.departure_date = date(2026, 8, 31)
        participant.save()
        participant.refresh_from_db()
        assert participant.nights == 4
        assert participant.total_fee == Decimal("235")

        participant.accommodation = ACCOMMODATION_AUTONOMOUS
        participant.save()
        participant.refresh_from_db()
        assert participant.accommodation_short == "Autonomous"
        assert participant.total_fee == Decimal("100")

    def test_no_dates_no_fee(self):
        participant = self.create_participant(arrival_date=None, departure_date=None)

        participant.refresh_from_db()
        assert participant.nights is None
        assert participant.total_fee is None
