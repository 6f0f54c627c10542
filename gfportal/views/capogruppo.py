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

from django.db.models import Q
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_http_methods

from gfportal.models.access import RoleChoices
from gfportal.models.registration import Participant
from gfportal.utils.auth import get_user_profile, parse_json_body, role_required
from gfportal.utils.common import parse_id
from gfportal.utils.exceptions import ForbiddenError, NotFoundError, ValidationApiError
from gfportal.utils.participant import apply_participant_update, participant_to_json, sort_participants

logger = logging.getLogger(__name__)


def get_leader_groups(user) -> list[str]:
    profile = get_user_profile(user)
    if not profile:
        return []
    return profile.group_codes()


def participant_in_groups(participant: Participant, groups: set[str]) -> bool:
    """Check the group code and the free text group label against the leader groups."""
    code = (participant.group.code if participant.group_id else "").strip()
    label = (participant.group_label or "").strip()
    return code in groups or label in groups


def participants_for_groups(groups: list[str]) -> list[Participant]:
    if not groups:
        return []
    participants = Participant.objects.select_related("group").filter(
        Q(group__code__in=groups) | Q(group_label__in=groups)
    )
    return sort_participants(participants.distinct())


@role_required(RoleChoices.GROUP_LEADER)
@require_http_methods(["GET", "PATCH"])
def capogruppo_participants(request: HttpRequest) -> JsonResponse:
    """List and edit the participants of the groups led by the current user."""
    groups = get_leader_groups(request.user)

    if request.method == "GET":
        return JsonResponse(
            {
                "groups": groups,
                "showGroupColumn": len(groups) > 1,
                "participants": [participant_to_json(p) for p in participants_for_groups(groups)],
            }
        )

    body = parse_json_body(request)
    participant_id = parse_id(body.get("id"))
    if not participant_id:
        raise ValidationApiError("id is required")

    participant = Participant.objects.select_related("group").filter(pk=participant_id).first()
    if not participant:
        raise NotFoundError("Participant not found")

    if not participant_in_groups(participant, set(groups)):
        logger.info(f"Group leader {request.user} denied on participant {participant.id}")
        raise ForbiddenError()

    apply_participant_update(participant, body)
    return JsonResponse({"ok": True, "participant": participant_to_json(participant)})
