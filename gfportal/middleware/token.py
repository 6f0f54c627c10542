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
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect

from gfportal.utils.login import login_with_token


class TokenAuthMiddleware:
    """Middleware to handle token-based authentication.

    Processes 'token' query parameters for automatic user login,
    then redirects to clean URL without the token.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Log in the user owning a one-shot token, then strip the token from the URL.

        The magic link callback handles its own token, so it is left alone.

        Args:
            request: Django HTTP request object containing potential token parameter

        Returns:
            HttpResponse: Redirect to the URL without the token if one was present,
                otherwise the response of the next middleware/view
        """
        token = request.GET.get("token")
        if not token or request.path.startswith("/auth/callback"):
            return self.get_response(request)

        login_with_token(request, token)

        parsed = urlparse(request.get_full_path())
        query = parse_qs(parsed.query)
        query.pop("token", None)
        clean_url = urlunparse(parsed._replace(query=urlencode(query, doseq=True)))
        return redirect(clean_url)
