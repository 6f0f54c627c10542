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

"""Tests for the Tally webhook: signature, normalization and ingestion"""

import base64
import hashlib
import hmac
import json
from datetime import date, datetime
from unittest.mock import patch

from django.test import Client

from gfportal.models.access import EventGroup
from gfportal.models.registration import Participant, WebhookEvent, WebhookStatus
from gfportal.tests.unit.base import BaseTestCase
from gfportal.utils.tally import (
    extract_answers,
    get_group_code,
    normalize_submission,
    parse_arrival_departure,
    verify_signature,
)

WEBHOOK_URL = "/api/tally/webhook"


def make_payload(**answers):
    values = {
        "Name/Nome/Nombre/Prenom": "Giulia",
        "Surname / Cognome / Apellido / Nom de famille": "Bianchi",
        "e-mail": "giulia@example.com",
        "Country of residence / Paese di residenza / País de residencia / Pays de résidence": "Italia",
        "City": "Milano",
        "Date of arrival and departure": "2026-08-27 - 2026-08-31",
    }
    values.update(answers)
    return {
        "eventId": "evt-1",
        "eventType": "FORM_RESPONSE",
        "createdAt": "2026-03-01T10:00:00.000Z",
        "data": {
            "responseId": "resp-1",
            "submissionId": "sub-1",
            "respondentId": "person-1",
            "fields": [
                {"key": f"question_{i}", "label": label, "value": value}
                for i, (label, value) in enumerate(values.items())
            ],
        },
    }


def sign(body: bytes, secret: str) -> str:
    return base64.b64encode(hmac.new(secret.encode(), body, hashlib.sha256).digest()).decode()


class TestSignature:
    def test_no_secret_accepts_everything(self, settings):
        settings.TALLY_WEBHOOK_SECRET = ""
        assert verify_signature(b"{}", None)

    def test_valid_signature_with_prefix(self, settings):
        settings.TALLY_WEBHOOK_SECRET = "s3cret"
        body = b'{"a": 1}'
        assert verify_signature(body, sign(body, "s3cret"))
        assert verify_signature(body, "sha256=" + sign(body, "s3cret"))

    def test_invalid_or_missing_signature(self, settings):
        settings.TALLY_WEBHOOK_SECRET = "s3cret"
        assert not verify_signature(b"{}", None)
        assert not verify_signature(b"{}", sign(b"{}", "other"))


class TestNormalization:
    def test_answers_keyed_by_label(self):
        answers = extract_answers(make_payload())
        assert answers["City"] == "Milano"
        assert answers["eventType"] == "FORM_RESPONSE"

    def test_list_values_are_joined(self):
        payload = {"fields": [{"label": "Options", "value": ["a", "b"]}]}
        assert extract_answers(payload)["Options"] == "a, b"

    def test_group_code_rules(self):
        assert get_group_code("Roma", "Italia", "Sant'Egidio Trastevere") == "Sant'Egidio Trastevere"
        assert get_group_code("Milano", "Italy", "") == "Milano"
        assert get_group_code("Kyiv", "Ukraine", "") == "Ukraine"

    def test_range_with_to_separator(self):
        arrival, departure = parse_arrival_departure({"Date of arrival and departure": "2026-08-28 to 2026-08-30"})
        assert arrival == datetime(2026, 8, 28)
        assert departure == datetime(2026, 8, 30)

    def test_departure_fallback(self):
        arrival, departure = parse_arrival_departure({"Departure": "2026-08-30"})
        assert arrival is None
        assert departure == datetime(2026, 8, 30)

    def test_submission_fields(self):
        submission = normalize_submission(make_payload())

        assert submission.name == "Giulia"
        assert submission.email == "giulia@example.com"
        assert submission.group_code == "Milano"
        assert submission.nights == 4
        assert submission.total_fee == 235
        assert submission.submission_id == "sub-1"
        assert submission.respondent_id == "person-1"
        assert submission.submitted_at.year == 2026
        assert not submission.missing_required()


class TestTallyWebhookView(BaseTestCase):
    def setup_method(self):
        self.client = Client()

    def post(self, payload, **headers):
        body = payload if isinstance(payload, (bytes, str)) else json.dumps(payload)
        return self.client.post(WEBHOOK_URL, data=body, content_type="application/json", headers=headers)

    def test_health_check(self):
        response = self.client.get(WEBHOOK_URL)
        assert response.status_code == 200
        assert response.json() == {"ok": True}

    def test_creates_participant_and_group(self):
        response = self.post(make_payload())

        assert response.status_code == 200
        participant = Participant.objects.get(pk=response.json()["id"])
        assert participant.email == "giulia@example.com"
        assert participant.arrival_date == date(2026, 8, 27)
        assert participant.departure_date == date(2026, 8, 31)
        assert participant.nights == 4
        assert participant.group.code == "Milano"
        assert participant.tally_submission_id == "sub-1"

        event = WebhookEvent.objects.get()
        assert event.status == WebhookStatus.PROCESSED
        assert event.event_type == "FORM_RESPONSE"
        assert event.normalized["group_code"] == "Milano"

    def test_existing_group_is_reused(self):
        group = self.create_group("Milano")

        self.post(make_payload())

        assert EventGroup.objects.count() == 1
        assert Participant.objects.get().group == group

    def test_duplicate_email_is_skipped(self):
        self.create_participant(email="Giulia@Example.com")

        response = self.post(make_payload())

        assert response.status_code == 200
        assert response.json() == {"ok": True, "skipped": "email_exists"}
        assert Participant.objects.count() == 1
        assert WebhookEvent.objects.get().status == WebhookStatus.SKIPPED

    def test_missing_required_fields(self):
        response = self.post(make_payload(**{"e-mail": ""}))

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields (name, surname, email)"
        assert WebhookEvent.objects.get().error_code == "missing_fields"

    def test_invalid_json(self):
        response = self.post(b"{not json")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON"}
        assert WebhookEvent.objects.get().error_code == "invalid_json"

    def test_invalid_signature(self, settings):
        settings.TALLY_WEBHOOK_SECRET = "s3cret"

        response = self.post(make_payload(), **{"tally-signature": "bogus"})

        assert response.status_code == 401
        assert Participant.objects.count() == 0
        assert WebhookEvent.objects.get().error_code == "invalid_signature"

    def test_valid_signature(self, settings):
        settings.TALLY_WEBHOOK_SECRET = "s3cret"
        body = json.dumps(make_payload()).encode()

        response = self.post(body, **{"tally-signature": sign(body, "s3cret")})

        assert response.status_code == 200
        assert Participant.objects.count() == 1

    def test_group_failure_does_not_block_registration(self):
        with patch("gfportal.views.webhook.resolve_group", side_effect=RuntimeError("boom")):
            response = self.post(make_payload())

        assert response.status_code == 200
        assert Participant.objects.get().group is None

    def test_unexpected_error_returns_500(self):
        with patch("gfportal.views.webhook.normalize_submission", side_effect=RuntimeError("boom")):
            response = self.post(make_payload())

        assert response.status_code == 500
        assert response.json() == {"error": "boom"}
        assert WebhookEvent.objects.get().error_code == "exception"
