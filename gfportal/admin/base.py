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
from typing import ClassVar

from django.contrib import admin
from import_export.admin import ImportExportModelAdmin


class DefModelAdmin(ImportExportModelAdmin):
    """Base admin class for portal models with import/export."""

    ordering: ClassVar[list] = ["-updated"]


def reduced(value: str | None) -> str:
    """Truncate string to maximum length with ellipsis."""
    max_length = 50

    if not value or len(value) < max_length:
        return value

    return value[:max_length] + "[...]"


class ReadOnlyInline(admin.TabularInline):
    extra = 0
    can_delete = False

    def has_add_permission(self, request, obj=None) -> bool:
        return False
