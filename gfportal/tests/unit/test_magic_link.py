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

"""Tests for the passwordless login flow"""

import re
from unittest.mock import patch

from django.core import mail
from django.test import Client

from gfportal.models.access import Profile, RoleChoices
from gfportal.tests.unit.base import BaseTestCase
from gfportal.utils.login import create_login_token, pop_login_token


def sent_token() -> str:
    html = mail.outbox[-1].alternatives[0][0]
    return re.search(r"token=([\w-]+)", html).group(1)


class TestMagicLink(BaseTestCase):
    def setup_method(self):
        self.client = Client()

    def test_login_page(self):
        response = self.client.get("/login?error=auth")

        assert response.status_code == 200
        assert b"invalid or expired" in response.content

    def test_request_link_sends_email(self):
        response = self.client.post("/login", {"email": "New.User@Example.com"})

        assert response.status_code == 200
        assert b"new.user@example.com" in response.content
        assert len(mail.outbox) == 1
        message = mail.outbox[0]
        assert message.subject == "Global Friendship - Sign in"
        assert message.to == ["new.user@example.com"]
        assert "http://testserver/auth/callback?token=" in message.body

        profile = Profile.objects.get(email="new.user@example.com")
        assert profile.role == RoleChoices.PARTICIPANT

    def test_invalid_email_shows_form_again(self):
        response = self.client.post("/login", {"email": "not-an-email"})

        assert response.status_code == 200
        assert len(mail.outbox) == 0

    def test_send_failure_shows_form_error(self):
        with patch("gfportal.utils.login.send_portal_mail", side_effect=OSError("smtp down")):
            response = self.client.post("/login", {"email": "guest@example.com"})

        assert response.status_code == 200
        assert "gfportal/login.html" in [template.name for template in response.templates]
        assert b"Unable to send the login email" in response.content
        assert b"guest@example.com" in response.content

    def test_callback_logs_in_once(self):
        self.create_profile(email="manager@example.com", role=RoleChoices.MANAGER)
        self.client.post("/login", {"email": "manager@example.com"})
        token = sent_token()

        response = self.client.get(f"/auth/callback?token={token}")
        assert response.status_code == 302
        assert response.url == "/dashboard/manager"

        other = Client()
        assert other.get(f"/auth/callback?token={token}").url == "/login?error=auth"

    def test_callback_honours_requested_role(self):
        self.create_profile(email="admin@example.com", role=RoleChoices.ADMIN)
        self.client.post("/login", {"email": "admin@example.com", "role": RoleChoices.MANAGER})

        response = self.client.get(f"/auth/callback?token={sent_token()}")

        assert response.url == "/dashboard/manager"

    def test_callback_without_token(self):
        response = self.client.get("/auth/callback")

        assert response.url == "/login?error=auth"

    def test_authenticated_user_skips_login(self):
        client, _profile = self.login_client(RoleChoices.GROUP_LEADER)

        response = client.get("/login")

        assert response.status_code == 302
        assert response.url == "/dashboard/capogruppo"

    def test_logout(self):
        client, _profile = self.login_client(RoleChoices.MANAGER)

        assert client.get("/logout").status_code == 405
        response = client.post("/logout")

        assert response.url == "/login"
        assert client.get("/dashboard").url.startswith("/login")


class TestLoginToken(BaseTestCase):
    def test_token_is_single_use(self):
        profile = self.create_profile()
        token = create_login_token(profile.user, RoleChoices.GROUP_LEADER)

        assert pop_login_token(token) == {"user_id": profile.user.id, "role": RoleChoices.GROUP_LEADER}
        assert pop_login_token(token) is None

    def test_token_query_parameter_logs_in_and_is_stripped(self):
        profile = self.create_profile(email="leader@example.com", role=RoleChoices.GROUP_LEADER)
        token = create_login_token(profile.user)
        client = Client()

        response = client.get(f"/dashboard/capogruppo?token={token}&tab=list")

        assert response.status_code == 302
        assert response.url == "/dashboard/capogruppo?tab=list"
        assert client.get("/dashboard/capogruppo").status_code == 200

    def test_unknown_token_is_stripped(self):
        response = Client().get("/login?token=unknown")

        assert response.status_code == 302
        assert response.url == "/login"
