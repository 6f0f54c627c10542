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

"""Tests for locale resolution and the locale endpoint"""

import pytest
from django.test import Client, RequestFactory

from gfportal.middleware.locale import LOCALE_COOKIE, get_request_locale, normalize_locale
from gfportal.tests.unit.base import BaseTestCase


@pytest.mark.parametrize(
    "value,expected",
    [
        ("it", "it"),
        ("IT-it", "it"),
        ("es_ES", "es"),
        ("nl", "nl-be"),
        ("nl-NL", "nl-be"),
        ("de-AT", "de"),
        ("uk-UA", "uk"),
        ("pt", None),
        ("", None),
        (None, None),
    ],
)
def test_normalize_locale(value, expected):
    assert normalize_locale(value) == expected


class TestRequestLocale:
    def setup_method(self):
        self.factory = RequestFactory()

    def test_cookie_wins(self):
        request = self.factory.get("/", HTTP_ACCEPT_LANGUAGE="it")
        request.COOKIES[LOCALE_COOKIE] = "fr"
        assert get_request_locale(request) == "fr"

    def test_unsupported_cookie_falls_back_to_english(self):
        request = self.factory.get("/", HTTP_ACCEPT_LANGUAGE="it")
        request.COOKIES[LOCALE_COOKIE] = "pt"
        assert get_request_locale(request) == "en"

    def test_first_supported_browser_language(self):
        request = self.factory.get("/", HTTP_ACCEPT_LANGUAGE="pt-BR,pt;q=0.9,uk-UA;q=0.8,it;q=0.7")
        assert get_request_locale(request) == "uk"

    def test_explicit_english(self):
        request = self.factory.get("/", HTTP_ACCEPT_LANGUAGE="en-GB,it;q=0.5")
        assert get_request_locale(request) == "en"

    def test_default(self):
        assert get_request_locale(self.factory.get("/")) == "en"


class TestSetLocale(BaseTestCase):
    def test_sets_cookie(self):
        response = self.send_json(Client(), "post", "/locale", {"locale": "nl-NL"})

        assert response.status_code == 200
        assert response.json() == {"ok": True, "locale": "nl-be"}
        assert response.cookies[LOCALE_COOKIE].value == "nl-be"

    def test_unsupported_locale(self):
        response = self.send_json(Client(), "post", "/locale", {"locale": "pt"})

        assert response.status_code == 400
        assert response.json() == {"error": "Unsupported locale"}

    def test_get_not_allowed(self):
        assert Client().get("/locale").status_code == 405
