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
import secrets
from typing import Optional

from django.conf import settings as conf_settings
from django.contrib.auth import get_user_model, login
from django.core.cache import cache
from django.http import HttpRequest
from django.template.loader import render_to_string

from gfportal.models.access import Profile
from gfportal.utils.email_template import html_to_text
from gfportal.utils.profiles import get_or_create_user
from gfportal.utils.tasks import send_portal_mail

logger = logging.getLogger(__name__)

USER_BACKEND = "django.contrib.auth.backends.ModelBackend"


def _token_key(token: str) -> str:
    return f"login_token:{token}"


def create_login_token(user, role: Optional[str] = None) -> str:
    """Store a one-shot login token for the user and return it."""
    token = secrets.token_urlsafe(32)
    cache.set(_token_key(token), {"user_id": user.id, "role": role}, timeout=conf_settings.LOGIN_TOKEN_TIMEOUT)
    return token


def pop_login_token(token: str) -> Optional[dict]:
    """Return and invalidate the payload stored for a token, or None if expired or unknown."""
    key = _token_key(token)
    payload = cache.get(key)
    if payload:
        cache.delete(key)
    return payload


def login_with_token(request: HttpRequest, token: str) -> Optional[dict]:
    """Log in the user owning the token.

    Returns:
        The token payload on success, None if the token or its user is invalid
    """
    payload = pop_login_token(token)
    if not payload:
        return None

    try:
        user = get_user_model().objects.get(pk=payload["user_id"])
    except get_user_model().DoesNotExist:
        logger.warning(f"Login token for missing user {payload['user_id']}")
        return None

    login(request, user, backend=USER_BACKEND)
    return payload


def ensure_login_profile(user) -> Profile:
    """Return the profile of a user logging in, creating a participant profile when missing."""
    profile = Profile.objects.filter(email__iexact=user.email or user.username).first()
    if profile:
        if profile.user_id != user.id:
            logger.warning(f"Profile {profile.email} is linked to another user")
        return profile
    return Profile.objects.create(user=user, email=(user.email or user.username).lower())


def send_magic_link(request: HttpRequest, email: str, role: Optional[str] = None) -> str:
    """Email a passwordless login link to the address, creating the user if needed.

    Args:
        request: Current request, used to build the absolute link
        email: Address the user typed in the login form
        role: Optional dashboard the user asked to open

    Returns:
        The generated token
    """
    user = get_or_create_user(email)
    ensure_login_profile(user)
    token = create_login_token(user, role)

    base_url = conf_settings.APP_BASE_URL or request.build_absolute_uri("/").rstrip("/")
    link = f"{base_url}/auth/callback?token={token}"
    html = render_to_string("gfportal/mail/magic_link.html", {"link": link, "email": user.email})
    # plain text clients only see the text part, which loses the href
    text = f"{html_to_text(html)}\n\n{link}"
    send_portal_mail("Global Friendship - Sign in", user.email, html=html, text=text)
    logger.info(f"Magic link sent to {user.email}")
    return token
