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
from typing import Callable

from gfportal.models.access import Profile, RoleChoices
from gfportal.models.registration import Participant
from gfportal.utils.email_template import (
    build_group_leader_template_map,
    build_participant_template_map,
    html_to_text,
    render_html,
    render_text,
)
from gfportal.utils.exceptions import NotFoundError, ValidationApiError
from gfportal.utils.participant import normalize_text
from gfportal.utils.tasks import get_mail_credentials, send_portal_mail

logger = logging.getLogger(__name__)

RECIPIENT_PARTICIPANTS = "participants"
RECIPIENT_GROUP_LEADERS = "group_leaders"


def _resolve_recipients(recipient_type: str, ids: list[int]) -> tuple[list, Callable]:
    if recipient_type == RECIPIENT_GROUP_LEADERS:
        rows = Profile.objects.filter(pk__in=ids, role=RoleChoices.GROUP_LEADER).prefetch_related("groups")
        builder = build_group_leader_template_map
    else:
        rows = Participant.objects.filter(pk__in=ids).select_related("group")
        builder = build_participant_template_map

    by_id = {row.id: row for row in rows}
    return [by_id[row_id] for row_id in ids if row_id in by_id], builder


def send_campaign(ids: list[int], subject: str, html: str, recipient_type: str = RECIPIENT_PARTICIPANTS) -> dict:
    """Send a personalised email to each selected recipient.

    Placeholders are rendered per recipient: escaped in the HTML body and raw in
    the subject and in the plain text alternative. Recipients without an email
    are skipped; send failures are collected and do not stop the campaign.

    Args:
        ids: Recipient ids, already deduplicated, in request order
        subject: Subject template
        html: HTML body template
        recipient_type: 'participants' or 'group_leaders'

    Returns:
        Campaign summary with requested, resolved, sent, sentIds, skipped and
        failed counts and lists

    Raises:
        ValidationApiError: If recipients, subject or body are missing
        NotFoundError: If none of the ids matches a recipient
    """
    subject = normalize_text(subject)
    html = normalize_text(html)
    if not ids:
        raise ValidationApiError("No recipients selected")
    if not subject:
        raise ValidationApiError("Subject is required")
    if not html:
        raise ValidationApiError("Message body is required")

    recipients, builder = _resolve_recipients(recipient_type, ids)
    if not recipients:
        raise NotFoundError("No matching recipients found")

    credentials = get_mail_credentials()
    sent_ids = []
    skipped = []
    failed = []
    for recipient in recipients:
        to = normalize_text(recipient.email)
        if not to:
            skipped.append({"id": recipient.id, "reason": "Missing email"})
            continue

        values = builder(recipient)
        body = render_html(html, values)
        try:
            send_portal_mail(
                render_text(subject, values),
                to,
                html=body,
                text=html_to_text(body),
                credentials=credentials,
            )
            sent_ids.append(recipient.id)
        except Exception as send_error:
            failed.append({"id": recipient.id, "reason": str(send_error) or "Send failed"})

    logger.info(f"Campaign sent to {len(sent_ids)} of {len(recipients)} recipients, {len(failed)} failed")
    return {
        "requested": len(ids),
        "resolved": len(recipients),
        "sent": len(sent_ids),
        "sentIds": sent_ids,
        "skipped": skipped,
        "failed": failed,
    }
