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
from typing import Any, Optional


class ApiError(Exception):
    """Error raised by JSON endpoints and rendered as ``{"error": message}``.

    Attributes:
        message (str): Human readable error message
        status (int): HTTP status code of the response
        extra (dict): Additional keys merged into the response body
    """

    status = 400

    def __init__(self, message: str, status: Optional[int] = None, extra: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status
        self.extra = extra or {}


class ValidationApiError(ApiError):
    """Exception raised when request input fails validation."""

    status = 400


class UnauthorizedError(ApiError):
    """Exception raised when no authenticated user is attached to the request."""

    status = 401

    def __init__(self, message: str = "Unauthorized", **kwargs) -> None:
        super().__init__(message, **kwargs)


class ForbiddenError(ApiError):
    """Exception raised when the user role cannot access the resource."""

    status = 403

    def __init__(self, message: str = "Forbidden", **kwargs) -> None:
        super().__init__(message, **kwargs)


class NotFoundError(ApiError):
    status = 404


class ConflictError(ApiError):
    status = 409
