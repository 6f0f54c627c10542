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
from decimal import ROUND_HALF_UP, Decimal

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from gfportal.models.access import Profile, RoleChoices
from gfportal.models.miscellanea import EmailTemplate
from gfportal.models.registration import Participant
from gfportal.utils.auth import parse_json_body, role_required
from gfportal.utils.campaign import RECIPIENT_GROUP_LEADERS, RECIPIENT_PARTICIPANTS, send_campaign
from gfportal.utils.common import parse_id, parse_id_list
from gfportal.utils.exceptions import NotFoundError, ValidationApiError
from gfportal.utils.finance import apply_finance_mutation, load_finance_dataset, to_decimal
from gfportal.utils.participant import (
    apply_participant_update,
    fee_row_to_json,
    group_labels,
    normalize_text,
    participant_to_json,
    sort_participants,
)
from gfportal.utils.presence import daily_presence

logger = logging.getLogger(__name__)

STAFF_ROLES = (RoleChoices.MANAGER, RoleChoices.ADMIN)


def _get_participant(body: dict) -> Participant:
    participant_id = parse_id(body.get("id"))
    if not participant_id:
        raise ValidationApiError("id is required")

    participant = Participant.objects.select_related("group").filter(pk=participant_id).first()
    if not participant:
        raise NotFoundError("Participant not found")
    return participant


def _participants_table(serializer) -> dict:
    participants = sort_participants(Participant.objects.select_related("group"))
    return {
        "groups": group_labels(participants),
        "showGroupColumn": True,
        "participants": [serializer(participant) for participant in participants],
    }


@role_required(*STAFF_ROLES)
@require_http_methods(["GET", "PATCH", "DELETE"])
def manager_participants(request: HttpRequest) -> JsonResponse:
    """List, edit and remove participants from the staff dashboard."""
    if request.method == "GET":
        return JsonResponse(_participants_table(participant_to_json))

    body = parse_json_body(request)
    participant = _get_participant(body)

    if request.method == "DELETE":
        participant.delete()
        logger.info(f"Participant {participant.id} deleted by {request.user}")
        return JsonResponse({"ok": True, "id": participant.id})

    apply_participant_update(participant, body)
    return JsonResponse({"ok": True, "participant": participant_to_json(participant)})


@role_required(*STAFF_ROLES)
@require_GET
def manager_daily_presence(request: HttpRequest) -> JsonResponse:
    accommodation = request.GET.get("accommodation", "both")
    return JsonResponse(daily_presence(Participant.objects.all(), accommodation), safe=False)


def _parse_fee_paid(value):
    """Return the paid fee rounded to cents, None to clear it.

    Raises:
        ValidationApiError: If the value is not a non-negative number
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None

    number = to_decimal(value) if isinstance(value, (int, float, str)) else None
    if number is None or number < 0:
        raise ValidationApiError("fee_paid must be a number greater than or equal to 0")
    return number.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


@role_required(RoleChoices.MANAGER)
@require_http_methods(["GET", "PATCH", "POST"])
def manager_participation_fees(request: HttpRequest) -> JsonResponse:
    """Track the fees paid by participants.

    ``PATCH`` sets the paid amount of one participant, ``POST`` marks the listed
    participants as fully paid.
    """
    if request.method == "GET":
        return JsonResponse(_participants_table(fee_row_to_json))

    body = parse_json_body(request)

    if request.method == "PATCH":
        participant_id = parse_id(body.get("id"))
        if not participant_id:
            raise ValidationApiError("id is required")
        fee_paid = _parse_fee_paid(body.get("fee_paid"))

        participant = Participant.objects.select_related("group").filter(pk=participant_id).first()
        if not participant:
            raise NotFoundError("Participant not found")

        participant.fee_paid = fee_paid
        participant.save()
        return JsonResponse({"ok": True, "participant": fee_row_to_json(participant)})

    participant_ids = parse_id_list(body.get("participantIds"))
    if not participant_ids:
        raise ValidationApiError("participantIds is required")

    updated = []
    for participant in Participant.objects.select_related("group").filter(pk__in=participant_ids):
        participant.fee_paid = participant.total_fee
        participant.save()
        updated.append(participant)

    logger.info(f"Marked {len(updated)} participants as fully paid")
    return JsonResponse({"ok": True, "participants": [fee_row_to_json(p) for p in sort_participants(updated)]})


@role_required(*STAFF_ROLES)
@require_POST
def manager_email_campaign(request: HttpRequest) -> JsonResponse:
    """Send a templated email to selected participants or group leaders."""
    body = parse_json_body(request)
    recipient_type = body.get("recipientType") or RECIPIENT_PARTICIPANTS
    if recipient_type not in (RECIPIENT_PARTICIPANTS, RECIPIENT_GROUP_LEADERS):
        raise ValidationApiError("Invalid recipientType")

    ids_key = "profileIds" if recipient_type == RECIPIENT_GROUP_LEADERS else "participantIds"
    result = send_campaign(parse_id_list(body.get(ids_key)), body.get("subject"), body.get("html"), recipient_type)
    return JsonResponse(result)


def _template_values(body: dict) -> dict:
    name = normalize_text(body.get("name"))
    html = normalize_text(body.get("html"))
    if not name:
        raise ValidationApiError("Template name is required")
    if not html:
        raise ValidationApiError("Template body is required")
    return {"name": name, "subject": normalize_text(body.get("subject")) or "", "html": html}


def _get_template(body: dict) -> EmailTemplate:
    template_id = parse_id(body.get("id"))
    if not template_id:
        raise ValidationApiError("Template id is required")
    template = EmailTemplate.objects.filter(pk=template_id).first()
    if not template:
        raise NotFoundError("Template not found")
    return template


@role_required(*STAFF_ROLES)
@require_http_methods(["GET", "POST", "PATCH", "DELETE"])
def manager_email_templates(request: HttpRequest) -> JsonResponse:
    """Manage reusable campaign templates."""
    if request.method == "GET":
        templates = EmailTemplate.objects.order_by("-updated")
        return JsonResponse({"templates": [template.to_json() for template in templates]})

    body = parse_json_body(request)

    if request.method == "POST":
        template = EmailTemplate.objects.create(
            **_template_values(body), created_by=request.user, updated_by=request.user
        )
        return JsonResponse({"template": template.to_json()})

    template = _get_template(body)

    if request.method == "DELETE":
        template.delete()
        return JsonResponse({"success": True})

    for field, value in _template_values(body).items():
        setattr(template, field, value)
    template.updated_by = request.user
    template.save()
    return JsonResponse({"template": template.to_json()})


@role_required(*STAFF_ROLES)
@require_GET
def manager_group_leaders(request: HttpRequest) -> JsonResponse:
    leaders = Profile.objects.filter(role=RoleChoices.GROUP_LEADER).prefetch_related("groups")
    leaders = sorted(leaders, key=lambda leader: ((leader.surname or "").lower(), (leader.name or "").lower()))
    return JsonResponse({"groupLeaders": [leader.to_json() for leader in leaders]})


@role_required(RoleChoices.MANAGER)
@require_http_methods(["GET", "POST"])
def manager_event_finance(request: HttpRequest) -> JsonResponse:
    """Read the event budget or apply one change to it."""
    if request.method == "GET":
        return JsonResponse(load_finance_dataset())

    body = parse_json_body(request)
    return JsonResponse(apply_finance_mutation(body, request.user))
