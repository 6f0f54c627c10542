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

"""Tests for participant partial updates and their validation order"""

from datetime import date
from decimal import Decimal

import pytest

from gfportal.tests.unit.base import BaseTestCase
from gfportal.utils.exceptions import ValidationApiError
from gfportal.utils.participant import (
    ACCESSIBILITY_OPTIONS,
    ACCOMMODATION_AUTONOMOUS,
    accommodation_long_to_short,
    accommodation_short_to_long,
    apply_participant_update,
    normalize_option_list,
    parse_stored_options,
    participant_to_json,
)


class TestAccommodationLabels:
    def test_long_to_short(self):
        assert accommodation_long_to_short(ACCOMMODATION_AUTONOMOUS) == "Autonomous"
        assert accommodation_long_to_short("atonoumous") == "Autonomous"
        assert accommodation_long_to_short("something else") is None

    def test_short_to_long(self):
        assert accommodation_short_to_long("autonomous") == ACCOMMODATION_AUTONOMOUS
        assert accommodation_short_to_long(ACCOMMODATION_AUTONOMOUS) == ACCOMMODATION_AUTONOMOUS
        assert accommodation_short_to_long("Hotel") is None


class TestOptionLists:
    def test_list_is_trimmed_and_deduplicated(self):
        assert normalize_option_list([" Vegan ", "Vegan", "", 3]) == ["Vegan"]

    def test_string_only_when_allowed(self):
        assert normalize_option_list("Vegan, Other", allow_string=True) == ["Vegan", "Other"]
        assert normalize_option_list("Vegan, Other") == []

    def test_stored_unknown_entries_are_dropped(self):
        assert parse_stored_options("Vegan, Pizza", ["Vegan"]) == ["Vegan"]


class TestApplyParticipantUpdate(BaseTestCase):
    def test_partial_update_keeps_other_fields(self):
        participant = self.create_participant(phone="123")

        apply_participant_update(participant, {"allergies": " nuts "})

        participant.refresh_from_db()
        assert participant.allergies == "nuts"
        assert participant.phone == "123"
        assert participant.email == "mario.rossi@example.com"

    def test_dates_recompute_fee(self):
        participant = self.create_participant()

        apply_participant_update(participant, {"arrival_date": "2026-08-27", "departure_date": "2026-08-31"})

        participant.refresh_from_db()
        assert participant.departure_date == date(2026, 8, 31)
        assert participant.nights == 4
        assert participant.total_fee == Decimal("235")

    def test_short_accommodation_is_stored_long(self):
        participant = self.create_participant()

        apply_participant_update(participant, {"accommodation": "Autonomous"})

        participant.refresh_from_db()
        assert participant.accommodation == ACCOMMODATION_AUTONOMOUS
        assert participant.total_fee == Decimal("100")

    @pytest.mark.parametrize(
        "body,message",
        [
            ({"name": " "}, "name and surname are required"),
            ({"email": ""}, "email is required"),
            ({"email": "not-an-email"}, "email is invalid"),
            ({"birth_date": "01/02/2000"}, "birth_date must be in YYYY-MM-DD format"),
            ({"arrival_date": "2026-08-20"}, "arrival_date must be between 2026-08-27 and 2026-08-29"),
            ({"departure_date": "2026-09-01"}, "departure_date must be between 2026-08-29 and 2026-08-31"),
            ({"accommodation": "Hotel"}, "Invalid accommodation value"),
            ({"dietary_needs": ["Carnivore"]}, "Invalid dietary_needs value"),
            (
                {"accessibility_needs": True, "accessibility_details": ["Flying"]},
                "Invalid accessibility_details value",
            ),
        ],
    )
    def test_validation_messages(self, body, message):
        participant = self.create_participant()

        with pytest.raises(ValidationApiError) as exc_info:
            apply_participant_update(participant, body)
        assert exc_info.value.message == message

    def test_same_day_stay_is_accepted(self):
        participant = self.create_participant()

        apply_participant_update(participant, {"arrival_date": "2026-08-29", "departure_date": "2026-08-29"})

        participant.refresh_from_db()
        assert participant.nights is None
        assert participant.total_fee is None

    def test_name_checked_before_dates(self):
        participant = self.create_participant()

        with pytest.raises(ValidationApiError) as exc_info:
            apply_participant_update(participant, {"surname": "", "birth_date": "bad"})
        assert exc_info.value.message == "name and surname are required"

    def test_accessibility_details_cleared_without_flag(self):
        participant = self.create_participant(
            accessibility_needs=True, accessibility_details=ACCESSIBILITY_OPTIONS[0]
        )

        apply_participant_update(participant, {"accessibility_needs": False})

        participant.refresh_from_db()
        assert participant.accessibility_needs is False
        assert participant.accessibility_details is None

    def test_self_service_cannot_change_email(self):
        participant = self.create_participant()

        apply_participant_update(participant, {"email": "other@example.com"}, allow_email=False)

        participant.refresh_from_db()
        assert participant.email == "mario.rossi@example.com"

    def test_json_lists_parsed(self):
        participant = self.create_participant(dietary_needs="Vegan, Other")

        data = participant_to_json(participant)
        assert data["dietary_needs"] == ["Vegan", "Other"]
        assert data["accommodation"] == "Organization"
        assert data["group"] == "-"
