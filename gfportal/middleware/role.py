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
from urllib.parse import urlencode

from django.db import DatabaseError
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect

from gfportal.utils.auth import DEFAULT_ROLE, ROLE_ROUTES, get_user_role, role_can_access_path

logger = logging.getLogger(__name__)

DASHBOARD_PATH = "/dashboard"


class RoleGateMiddleware:
    """Keep each role inside its own dashboard.

    Only paths under ``/dashboard`` are inspected. Anonymous users are sent to
    the login page; authenticated users opening a dashboard of another role are
    sent back to their own. Users without a valid role are treated as
    participants.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        path = request.path.rstrip("/") or "/"
        if not (path == DASHBOARD_PATH or path.startswith(f"{DASHBOARD_PATH}/")):
            return self.get_response(request)

        if not request.user.is_authenticated:
            return redirect(f"/login?{urlencode({'redirectedFrom': request.path})}")

        try:
            role = get_user_role(request.user)
        except DatabaseError as lookup_error:
            logger.error(f"Role lookup failed for user {request.user.pk}: {lookup_error}")
            return redirect("/login?error=role_lookup")

        role = role or DEFAULT_ROLE
        role_base = ROLE_ROUTES[role]

        if path == DASHBOARD_PATH or not role_can_access_path(role, path):
            return redirect(role_base)

        request.role = role
        return self.get_response(request)
