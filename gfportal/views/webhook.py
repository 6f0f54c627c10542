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
import json
import logging
from typing import Optional

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from gfportal.models.registration import Participant, WebhookEvent, WebhookStatus
from gfportal.utils.tally import (
    TallySubmission,
    get_signature_header,
    normalize_submission,
    resolve_group,
    verify_signature,
)

logger = logging.getLogger(__name__)

TALLY_SOURCE = "tally"


def _log_event(
    status: str,
    payload=None,
    submission: Optional[TallySubmission] = None,
    error_code: Optional[str] = None,
    error_message: Optional[str] = None,
) -> None:
    """Record the outcome of a webhook delivery."""
    payload = payload if isinstance(payload, dict) else {}
    WebhookEvent.objects.create(
        source=TALLY_SOURCE,
        event_type=str(payload.get("eventType") or "unknown"),
        submission_id=submission.submission_id if submission else None,
        respondent_id=submission.respondent_id if submission else None,
        email=submission.email if submission else None,
        status=status,
        error_code=error_code,
        error_message=error_message,
        payload=payload,
        normalized=submission.to_json() if submission else None,
    )


def _create_participant(payload: dict, submission: TallySubmission) -> Participant:
    participant = Participant(
        name=submission.name,
        surname=submission.surname,
        email=submission.email,
        nationality=submission.nationality or None,
        residence_country=submission.residence_country or None,
        city=submission.city or None,
        arrival_date=submission.arrival.date() if submission.arrival else None,
        departure_date=submission.departure.date() if submission.departure else None,
        tally_submission_id=submission.submission_id,
        tally_respondent_id=submission.respondent_id,
        submitted_at=submission.submitted_at,
        tally_payload=payload,
    )
    participant.save()

    # group assignment never blocks the registration
    try:
        group = resolve_group(submission.group_code)
    except Exception as group_error:
        logger.exception(f"Group resolution failed for {submission.group_code}: {group_error}")
        group = None
    if group:
        participant.group = group
        participant.save(update_fields=["group", "updated"])

    return participant


def _handle_submission(request: HttpRequest) -> JsonResponse:
    raw_body = request.body

    if not verify_signature(raw_body, get_signature_header(request.headers)):
        logger.warning("Invalid signature on Tally webhook")
        _log_event(WebhookStatus.ERROR, error_code="invalid_signature", error_message="Invalid signature")
        return JsonResponse({"error": "Invalid signature"}, status=401)

    try:
        payload = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Invalid JSON on Tally webhook")
        _log_event(WebhookStatus.ERROR, error_code="invalid_json", error_message="Invalid JSON")
        return JsonResponse({"error": "Invalid JSON"}, status=400)

    submission = normalize_submission(payload if isinstance(payload, dict) else {})

    if submission.missing_required():
        message = "Missing required fields (name, surname, email)"
        logger.warning(f"Tally webhook rejected: {message}")
        _log_event(WebhookStatus.ERROR, payload, submission, "missing_fields", message)
        return JsonResponse({"error": message}, status=400)

    if Participant.objects.filter(email__iexact=submission.email).exists():
        logger.info(f"Tally webhook skipped, email already registered: {submission.email}")
        _log_event(WebhookStatus.SKIPPED, payload, submission, "email_exists")
        return JsonResponse({"ok": True, "skipped": "email_exists"})

    participant = _create_participant(payload, submission)
    _log_event(WebhookStatus.PROCESSED, payload, submission)
    logger.info(f"Registered participant {participant.id} from Tally submission {submission.submission_id}")
    return JsonResponse({"ok": True, "id": participant.id})


@csrf_exempt
@require_http_methods(["GET", "POST"])
def tally_webhook(request: HttpRequest) -> JsonResponse:
    """Receive registration submissions from Tally.

    ``GET`` answers a health check. ``POST`` verifies the signature, normalizes
    the submission and stores a new participant unless the email is already
    registered. Every delivery is recorded as a WebhookEvent.
    """
    if request.method == "GET":
        return JsonResponse({"ok": True})

    try:
        return _handle_submission(request)
    except Exception as webhook_error:
        logger.exception(f"Tally webhook error: {webhook_error}")
        try:
            _log_event(WebhookStatus.ERROR, error_code="exception", error_message=str(webhook_error))
        except Exception as log_error:
            logger.error(f"Unable to record webhook failure: {log_error}")
        return JsonResponse({"error": str(webhook_error) or "Unknown error"}, status=500)
