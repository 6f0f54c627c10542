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

from django.contrib.auth import logout
from django.http import HttpRequest, HttpResponse, HttpResponseRedirect, JsonResponse
from django.shortcuts import redirect, render
from django.utils.translation import gettext_lazy as _
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from gfportal.forms.auth import MagicLinkForm
from gfportal.middleware.locale import LOCALE_COOKIE, normalize_locale
from gfportal.utils.auth import get_role_route, get_user_role, is_app_role, parse_json_body
from gfportal.utils.exceptions import ValidationApiError
from gfportal.utils.login import login_with_token, send_magic_link

logger = logging.getLogger(__name__)

LOCALE_COOKIE_MAX_AGE = 60 * 60 * 24 * 365


@require_http_methods(["GET", "POST"])
def login_view(request: HttpRequest) -> HttpResponse:
    """Show the login form and email a magic link on submission.

    Authenticated users are sent straight to their dashboard.
    """
    if request.user.is_authenticated:
        return redirect(get_role_route(get_user_role(request.user)))

    ctx = {"error": request.GET.get("error"), "redirected_from": request.GET.get("redirectedFrom")}

    if request.method == "POST":
        form = MagicLinkForm(request.POST)
        if form.is_valid():
            email = form.cleaned_data["email"]
            role = form.cleaned_data.get("role") or None
            try:
                send_magic_link(request, email, role)
                return render(request, "gfportal/check_email.html", {"email": email})
            except Exception as send_error:
                logger.error(f"Magic link for {email} not sent: {send_error}")
                form.add_error(None, _("Unable to send the login email, please try again later."))
    else:
        form = MagicLinkForm()

    ctx["form"] = form
    return render(request, "gfportal/login.html", ctx)


@require_GET
def auth_callback(request: HttpRequest) -> HttpResponseRedirect:
    """Complete a magic link login and open the requested dashboard."""
    token = request.GET.get("token")
    payload = login_with_token(request, token) if token else None
    if not payload:
        return redirect("/login?error=auth")

    requested_role = payload.get("role")
    if is_app_role(requested_role):
        return redirect(get_role_route(requested_role))
    return redirect(get_role_route(get_user_role(request.user)))


@require_POST
def logout_view(request: HttpRequest) -> HttpResponseRedirect:
    logout(request)
    return redirect("/login")


@require_POST
def set_locale(request: HttpRequest) -> JsonResponse:
    """Store the chosen interface language in the locale cookie."""
    body = parse_json_body(request)
    locale = normalize_locale(body.get("locale"))
    if not locale:
        raise ValidationApiError("Unsupported locale")

    response = JsonResponse({"ok": True, "locale": locale})
    response.set_cookie(LOCALE_COOKIE, locale, max_age=LOCALE_COOKIE_MAX_AGE, samesite="Lax")
    return response
