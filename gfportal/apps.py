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
from django.apps import AppConfig


class GfPortalConfig(AppConfig):
    name = "gfportal"
    default_auto_field = "django.db.models.BigAutoField"

    # Import signals
    def ready(self):
        _ = __import__("gfportal.models.signals")
        # Register the admin modules individually
        _ = __import__("gfportal.admin.access")
        _ = __import__("gfportal.admin.accounting")
        _ = __import__("gfportal.admin.miscellanea")
        _ = __import__("gfportal.admin.registration")
