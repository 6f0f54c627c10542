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

from gfportal.admin.base import DefModelAdmin
from gfportal.models.access import EventGroup, Profile


@admin.register(EventGroup)
class EventGroupAdmin(DefModelAdmin):
    list_display = ("code", "name", "created")
    search_fields: ClassVar[list] = ["code", "name"]


@admin.register(Profile)
class ProfileAdmin(DefModelAdmin):
    """Admin interface for Profile model."""

    list_display: ClassVar[tuple] = ("email", "name", "surname", "role", "italy", "rome")
    search_fields: ClassVar[tuple] = ("email", "name", "surname")
    list_filter: ClassVar[tuple] = ("role", "italy", "rome")
    autocomplete_fields: ClassVar[list] = ["user"]
    filter_horizontal: ClassVar[tuple] = ("groups",)
