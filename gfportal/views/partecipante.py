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
import logging
from datetime import datetime, timezone

from django.conf import settings as conf_settings
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_http_methods, require_POST

from gfportal.models.access import RoleChoices
from gfportal.models.registration import Participant
from gfportal.utils.auth import parse_json_body, role_required
from gfportal.utils.common import parse_id
from gfportal.utils.exceptions import ApiError, ConflictError, NotFoundError, UnauthorizedError, ValidationApiError
from gfportal.utils.participant import (
    apply_participant_update,
    normalize_text,
    participant_candidate,
    self_service_to_json,
)
from gfportal.utils.tasks import send_portal_mail

logger = logging.getLogger(__name__)

MAX_CONTACT_MESSAGE_LENGTH = 4000

PARTICIPANT_ROLES = tuple(RoleChoices.values)

EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def get_session_email(request: HttpRequest) -> str:
    email = (request.user.email or request.user.username or "").strip().lower()
    if not email:
        raise UnauthorizedError()
    return email


def participants_for_email(email: str) -> list[Participant]:
    """Return the registrations made with an email, newest submission first."""
    participants = Participant.objects.select_related("group").filter(email__iexact=email)
    return sorted(participants, key=lambda p: p.submitted_at or EPOCH, reverse=True)


def select_participant(email: str, participant_id) -> tuple[Participant, list[dict]]:
    """Pick the registration a self-service request refers to.

    Args:
        email: Session email
        participant_id: Optional id chosen by the user among their registrations

    Returns:
        The selected participant and the candidate list

    Raises:
        NotFoundError: If the email has no registration or the id is not among them
        ConflictError: If several registrations exist and no id was given
    """
    participants = participants_for_email(email)
    if not participants:
        raise NotFoundError("Participant not found")

    candidates = [participant_candidate(participant) for participant in participants]

    if participant_id not in (None, ""):
        selected_id = parse_id(participant_id)
        for participant in participants:
            if participant.id == selected_id:
                return participant, candidates
        raise NotFoundError(
            "Selected participant not found for this email",
            extra={"code": "PARTICIPANT_NOT_FOUND", "requiresSelection": True, "participants": candidates},
        )

    if len(participants) > 1:
        raise ConflictError(
            "Multiple participants found for this email",
            extra={"code": "PARTICIPANT_SELECTION_REQUIRED", "requiresSelection": True, "participants": candidates},
        )

    return participants[0], candidates


def _cancellation_text(participant: Participant, email: str) -> str:
    name = (participant.name or "").strip() or "Participant"
    surname = (participant.surname or "").strip()
    full_name = f"{name} {surname}".strip()
    submission_id = (participant.tally_submission_id or "").strip() or "-"
    return "\n".join(
        [
            "Your registration cancellation has been completed.",
            "",
            f"Name: {full_name}",
            f"Group: {participant.group_display()}",
            f"Tally submission ID: {submission_id}",
            f"Email: {email}",
            "",
            "If this was not requested by you, please contact the organizers immediately.",
        ]
    )


@role_required(*PARTICIPANT_ROLES)
@require_http_methods(["GET", "PATCH", "DELETE"])
def partecipante_me(request: HttpRequest) -> JsonResponse:
    """Let a participant read, correct or cancel their own registration."""
    email = get_session_email(request)

    if request.method == "GET":
        participant_id = request.GET.get("participantId") or request.GET.get("participant_id")
        participant, candidates = select_participant(email, participant_id)
        return JsonResponse(
            {
                "requiresSelection": False,
                "participants": candidates,
                "selectedParticipantId": participant.id,
                "participant": self_service_to_json(participant),
            }
        )

    body = parse_json_body(request)
    participant, _candidates = select_participant(email, body.get("participant_id") or body.get("participantId"))

    if request.method == "PATCH":
        apply_participant_update(participant, body, allow_email=False)
        return JsonResponse({"ok": True})

    confirmation_email = (normalize_text(body.get("confirmation_email")) or "").lower()
    if not confirmation_email:
        raise ValidationApiError("confirmation_email is required")
    if confirmation_email != email:
        raise ValidationApiError("confirmation_email does not match your account email")

    text = _cancellation_text(participant, email)
    participant.delete()
    logger.info(f"Participant {participant.id} cancelled their registration")

    email_sent = True
    try:
        send_portal_mail("Your Global Friendship registration has been cancelled", email, text=text)
    except Exception as send_error:
        logger.warning(f"Cancellation email to {email} failed: {send_error}")
        email_sent = False

    return JsonResponse({"ok": True, "emailSent": email_sent})


@role_required(*PARTICIPANT_ROLES)
@require_POST
def partecipante_contact(request: HttpRequest) -> JsonResponse:
    """Forward a participant message to the organizers."""
    email = get_session_email(request)
    body = parse_json_body(request)

    message = normalize_text(body.get("message"))
    if not message:
        raise ValidationApiError("Message is required")
    if len(message) > MAX_CONTACT_MESSAGE_LENGTH:
        raise ValidationApiError(f"Message is too long (max {MAX_CONTACT_MESSAGE_LENGTH} characters)")

    participants = participants_for_email(email)
    if not participants:
        raise NotFoundError("Participant not found")
    participant = participants[0]

    name = (participant.name or "").strip() or "-"
    surname = (participant.surname or "").strip() or "-"
    text = "\n".join(
        [
            "A participant sent a message to the organizers.",
            "",
            f"Participant name: {name}",
            f"Participant surname: {surname}",
            f"Participant group: {participant.group_display()}",
            f"Tally submission ID: {(participant.tally_submission_id or '').strip() or '-'}",
            f"Participant email: {email}",
            "",
            "Message:",
            message,
        ]
    )

    try:
        send_portal_mail(
            f"Participant message - {name} {surname}", conf_settings.ORGANIZERS_EMAIL, text=text, reply_to=email
        )
    except Exception as send_error:
        raise ApiError(str(send_error) or "Unable to send message", status=500) from send_error

    return JsonResponse({"ok": True})
