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
from functools import wraps
from typing import Any, Callable, Optional

from django.http import HttpRequest

from gfportal.models.access import Profile, RoleChoices
from gfportal.utils.exceptions import ForbiddenError, UnauthorizedError, ValidationApiError

logger = logging.getLogger(__name__)

ROLE_ROUTES = {
    RoleChoices.ADMIN: "/dashboard/admin",
    RoleChoices.GROUP_LEADER: "/dashboard/capogruppo",
    RoleChoices.PARTICIPANT: "/dashboard/partecipante",
    RoleChoices.MANAGER: "/dashboard/manager",
    RoleChoices.ACCOMMODATION: "/dashboard/alloggi",
}

ROLE_LABELS = {
    RoleChoices.ADMIN: "Admin",
    RoleChoices.GROUP_LEADER: "Group Leader",
    RoleChoices.PARTICIPANT: "Participant",
    RoleChoices.MANAGER: "Manager",
    RoleChoices.ACCOMMODATION: "Accommodation",
}

DEFAULT_ROLE = RoleChoices.PARTICIPANT


def is_app_role(value: Any) -> bool:
    return bool(value) and value in RoleChoices.values


def role_can_access_path(role: str, path: str) -> bool:
    """Check whether a role may open a dashboard path.

    Admins can open every path, other roles only their own base path and the
    pages below it.
    """
    if role == RoleChoices.ADMIN:
        return True
    role_base = ROLE_ROUTES[role]
    return path == role_base or path.startswith(f"{role_base}/")


def get_user_profile(user) -> Optional[Profile]:
    if not user or not user.is_authenticated:
        return None
    return Profile.objects.filter(user_id=user.id).first()


def get_user_role(user) -> Optional[str]:
    """Return the role stored on the user profile, or None when missing or invalid."""
    profile = get_user_profile(user)
    if profile and is_app_role(profile.role):
        return profile.role
    return None


def get_effective_role(user) -> str:
    """Role used for authorization: users without a valid role act as participants."""
    return get_user_role(user) or DEFAULT_ROLE


def get_role_route(role: Optional[str]) -> str:
    return ROLE_ROUTES[role] if is_app_role(role) else "/dashboard"


def role_required(*roles: str) -> Callable:
    """Restrict a JSON view to authenticated users holding one of the given roles.

    Args:
        *roles: Roles allowed to call the view

    Returns:
        Decorator raising UnauthorizedError for anonymous users and
        ForbiddenError for any other role
    """

    def decorator(view_func: Callable) -> Callable:
        @wraps(view_func)
        def wrapper(request: HttpRequest, *args, **kwargs):
            if not request.user.is_authenticated:
                raise UnauthorizedError()

            role = get_effective_role(request.user)
            if role not in roles:
                logger.info(f"Role {role} denied on {request.path}")
                raise ForbiddenError()

            request.role = role
            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator


def parse_json_body(request: HttpRequest) -> dict:
    """Decode the request body as a JSON object.

    Raises:
        ValidationApiError: If the body is not a valid JSON object
    """
    try:
        body = json.loads(request.body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as decode_error:
        raise ValidationApiError("Invalid JSON body") from decode_error

    if not isinstance(body, dict):
        raise ValidationApiError("Invalid JSON body")
    return body
