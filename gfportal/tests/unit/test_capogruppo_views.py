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

"""Tests for the group leader participant table"""

from datetime import date

from gfportal.models.access import RoleChoices
from gfportal.tests.unit.base import BaseTestCase

URL = "/api/capogruppo/participants"


class TestCapogruppoParticipants(BaseTestCase):
    def setup_groups(self):
        milano = self.create_group("Milano")
        self.create_group("Kyiv")
        self.own = self.create_participant(name="Anna", surname="Verdi", email="anna@example.com", group=milano)
        self.labelled = self.create_participant(
            name="Olha", surname="Bondar", email="olha@example.com", group_label="Kyiv"
        )
        self.other = self.create_participant(
            name="Jean", surname="Dupont", email="jean@example.com", group_label="Paris"
        )

    def test_lists_participants_of_own_groups(self):
        self.setup_groups()
        client, _profile = self.login_client(RoleChoices.GROUP_LEADER, groups=["Milano", "Kyiv"])

        data = client.get(URL).json()

        assert data["groups"] == ["Kyiv", "Milano"]
        assert data["showGroupColumn"] is True
        assert [row["email"] for row in data["participants"]] == ["olha@example.com", "anna@example.com"]

    def test_single_group_hides_group_column(self):
        self.setup_groups()
        client, _profile = self.login_client(RoleChoices.GROUP_LEADER, groups=["Milano"])

        data = client.get(URL).json()

        assert data["showGroupColumn"] is False
        assert [row["id"] for row in data["participants"]] == [self.own.id]

    def test_leader_without_groups_sees_nothing(self):
        self.setup_groups()
        client, _profile = self.login_client(RoleChoices.GROUP_LEADER)

        assert client.get(URL).json() == {"groups": [], "showGroupColumn": False, "participants": []}

    def test_update_own_participant(self):
        self.setup_groups()
        client, _profile = self.login_client(RoleChoices.GROUP_LEADER, groups=["Kyiv"])

        response = self.send_json(
            client,
            "patch",
            URL,
            {"id": self.labelled.id, "arrival_date": "2026-08-28", "dietary_needs": ["Vegan"]},
        )

        assert response.status_code == 200
        assert response.json()["participant"]["dietary_needs"] == ["Vegan"]
        self.labelled.refresh_from_db()
        assert self.labelled.arrival_date == date(2026, 8, 28)

    def test_update_outside_groups_is_forbidden(self):
        self.setup_groups()
        client, _profile = self.login_client(RoleChoices.GROUP_LEADER, groups=["Milano"])

        response = self.send_json(client, "patch", URL, {"id": self.other.id, "name": "Jacques"})

        assert response.status_code == 403
        self.other.refresh_from_db()
        assert self.other.name == "Jean"

    def test_update_errors(self):
        client, _profile = self.login_client(RoleChoices.GROUP_LEADER, groups=["Milano"])

        assert self.send_json(client, "patch", URL, {"id": "abc"}).json() == {"error": "id is required"}
        assert self.send_json(client, "patch", URL, {"id": 12345}).status_code == 404

    def test_managers_cannot_use_leader_endpoint(self):
        client, _profile = self.login_client(RoleChoices.MANAGER)

        assert client.get(URL).status_code == 403
