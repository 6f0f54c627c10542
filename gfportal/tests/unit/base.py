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

"""Base test case for unit tests with common methods"""

import json
from datetime import date

import pytest
from django.test import Client

from gfportal.models.access import EventGroup, Profile, RoleChoices
from gfportal.models.registration import Participant
from gfportal.utils.participant import ACCOMMODATION_ORGANIZATION


@pytest.mark.django_db
class BaseTestCase:
    """Base test case with common test object factories"""

    def create_group(self, code="Milano", **kwargs):
        """Create a new group with defaults"""
        defaults = {"code": code, "name": code}
        defaults.update(kwargs)
        return EventGroup.objects.create(**defaults)

    def create_profile(self, email="leader@example.com", role=RoleChoices.GROUP_LEADER, groups=None, **kwargs):
        """Create a profile, and its user, linked to the given group codes"""
        defaults = {"email": email, "role": role, "name": "Test", "surname": "Profile"}
        defaults.update(kwargs)
        profile = Profile.objects.create(**defaults)
        for code in groups or []:
            group = EventGroup.objects.filter(code=code).first() or self.create_group(code)
            profile.groups.add(group)
        return profile

    def create_participant(self, **kwargs):
        """Create a new participant with defaults"""
        defaults = {
            "name": "Mario",
            "surname": "Rossi",
            "email": "mario.rossi@example.com",
            "arrival_date": date(2026, 8, 27),
            "departure_date": date(2026, 8, 30),
            "accommodation": ACCOMMODATION_ORGANIZATION,
        }
        defaults.update(kwargs)
        return Participant.objects.create(**defaults)

    def login_client(self, role=RoleChoices.MANAGER, email=None, groups=None):
        """Return a test client logged in as a user holding the given role"""
        email = email or f"{role}@example.com"
        profile = self.create_profile(email=email, role=role, groups=groups)
        client = Client()
        client.force_login(profile.user)
        return client, profile

    @staticmethod
    def send_json(client, method, path, body=None):
        """Send a JSON request with any method and return the response"""
        handler = getattr(client, method.lower())
        return handler(path, data=json.dumps(body or {}), content_type="application/json")
