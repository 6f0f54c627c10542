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
from typing import Optional

from django.http import HttpRequest, HttpResponse, JsonResponse

from gfportal.utils.exceptions import ApiError
from gfportal.utils.tasks import notify_admins

logger = logging.getLogger(__name__)


class ExceptionHandlingMiddleware:
    """Render API errors as JSON instead of the default error pages."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request: HttpRequest, exception: Exception) -> Optional[HttpResponse]:
        """Map exceptions raised by views to JSON error responses.

        Args:
            request: The HTTP request object that triggered the exception
            exception: The exception instance that was raised

        Returns:
            JsonResponse for API errors and for any exception under ``/api/``,
            None otherwise to let Django handle it
        """
        handlers = [
            (ApiError, lambda ex: JsonResponse({"error": ex.message, **ex.extra}, status=ex.status)),
        ]

        for exc_type, handler in handlers:
            if isinstance(exception, exc_type):
                return handler(exception)

        if request.path.startswith("/api/"):
            return self._handle_unexpected(request, exception)

        return None

    @staticmethod
    def _handle_unexpected(request: HttpRequest, exception: Exception) -> JsonResponse:
        logger.exception(f"Unhandled error on {request.method} {request.path}: {exception}")
        notify_admins(f"[Global Friendship] Error on {request.path}", str(exception), exception)
        return JsonResponse({"error": str(exception) or "Internal server error"}, status=500)
