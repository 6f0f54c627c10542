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

from django.db import transaction
from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_http_methods, require_POST

from gfportal.models.access import Profile, RoleChoices
from gfportal.models.miscellanea import EmailSettings
from gfportal.utils.auth import is_app_role, parse_json_body, role_required
from gfportal.utils.common import parse_id
from gfportal.utils.exceptions import ApiError, ValidationApiError
from gfportal.utils.participant import is_valid_email
from gfportal.utils.profiles import clean_group_list, set_profile_groups, update_profile, upsert_profile_by_email
from gfportal.utils.tasks import get_mail_credentials, send_portal_mail
from gfportal.utils.upload import import_profiles

logger = logging.getLogger(__name__)


def _text_or_none(body: dict, key: str):
    return str(body[key]) if body.get(key) is not None else None


def _bool_or_none(body: dict, key: str):
    return bool(body[key]) if body.get(key) is not None else None


@role_required(RoleChoices.ADMIN)
@require_http_methods(["GET", "POST", "PATCH"])
def admin_profiles(request: HttpRequest) -> JsonResponse:
    """Manage user profiles and their group links.

    ``POST`` creates or updates a profile by email and replaces its groups,
    ``PATCH`` applies a partial update by id.
    """
    if request.method == "GET":
        profiles = Profile.objects.order_by("-created")
        fields = ["id", "email", "name", "surname", "role", "created"]
        return JsonResponse({"data": [profile.as_dict(fields=fields) for profile in profiles]})

    body = parse_json_body(request)

    if request.method == "POST":
        groups = clean_group_list(body.get("groups"))
        if not groups:
            raise ValidationApiError("At least one group is required")

        with transaction.atomic():
            profile = upsert_profile_by_email(
                {
                    "email": body.get("email") or "",
                    "name": body.get("name") or None,
                    "surname": body.get("surname") or None,
                    "role": str(body.get("role") or ""),
                    "phone": _text_or_none(body, "phone"),
                    "italy": _bool_or_none(body, "italy"),
                    "rome": _bool_or_none(body, "rome"),
                }
            )
            set_profile_groups(profile, groups)

        logger.info(f"Profile {profile.email} saved by {request.user}")
        return JsonResponse({"data": profile.to_json()})

    profile_id = parse_id(body.get("id"))
    if not profile_id:
        raise ValidationApiError("id is required")

    data = {key: body[key] for key in ("name", "surname", "role", "phone", "italy", "rome", "groups") if key in body}
    profile = update_profile(profile_id, data)
    return JsonResponse({"data": profile.to_json()})


@role_required(RoleChoices.ADMIN)
@require_POST
def admin_profiles_upload(request: HttpRequest) -> JsonResponse:
    """Bulk import profiles from a semicolon separated CSV file."""
    uploaded_file = request.FILES.get("file")
    default_role = request.POST.get("defaultRole") or RoleChoices.GROUP_LEADER

    if not uploaded_file:
        raise ValidationApiError("Missing file")
    if not is_app_role(default_role):
        raise ValidationApiError("Invalid role")

    result = import_profiles(uploaded_file, default_role)
    logger.info(f"Profile import by {request.user}: {result['imported']} imported, {len(result['errors'])} errors")
    return JsonResponse(result)


def _email_settings_json(email_settings: EmailSettings) -> dict:
    return {
        "senderEmail": email_settings.display_sender(),
        "passwordIsSet": email_settings.password_is_set(),
        "updatedAt": email_settings.updated.isoformat() if email_settings.updated else None,
    }


@role_required(RoleChoices.ADMIN)
@require_http_methods(["GET", "PATCH", "PUT"])
def admin_email_settings(request: HttpRequest) -> JsonResponse:
    """Read or change the sender address and the Google App Password."""
    email_settings = EmailSettings.load()
    if request.method == "GET":
        return JsonResponse(_email_settings_json(email_settings))

    body = parse_json_body(request)
    sender_email = body.get("senderEmail").strip() if isinstance(body.get("senderEmail"), str) else ""
    if not sender_email or not is_valid_email(sender_email):
        raise ValidationApiError("Valid senderEmail is required")

    password = body.get("googleAppPassword")
    email_settings.sender_email = sender_email
    # an empty password keeps the stored one
    if isinstance(password, str) and password.strip():
        email_settings.app_password = password.strip()
    email_settings.save()

    logger.info(f"Email settings updated by {request.user}")
    return JsonResponse({"ok": True, **_email_settings_json(email_settings)})


@role_required(RoleChoices.ADMIN)
@require_POST
def admin_email_settings_test(request: HttpRequest) -> JsonResponse:
    """Send a test message with the current sender configuration."""
    body = parse_json_body(request)
    recipient = body.get("recipientEmail").strip() if isinstance(body.get("recipientEmail"), str) else ""
    if not recipient or not is_valid_email(recipient):
        raise ValidationApiError("Valid recipientEmail is required")

    credentials = get_mail_credentials()
    if not credentials.password:
        raise ValidationApiError("Google App Password is not configured")

    try:
        send_portal_mail(
            "Global Friendship - Email settings test",
            recipient,
            text="This is a test email from Admin > Settings > Email.",
            credentials=credentials,
        )
    except Exception as send_error:
        raise ApiError(str(send_error) or "Unable to send test email", status=500) from send_error

    return JsonResponse({"ok": True})
