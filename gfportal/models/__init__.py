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
from gfportal.models.access import EventGroup, Profile, RoleChoices  # noqa: F401
from gfportal.models.accounting import (  # noqa: F401
    BudgetItem,
    FinanceSettings,
    Sponsorship,
    SponsorshipAllocation,
    Transaction,
    TransactionAllocation,
)
from gfportal.models.miscellanea import EmailSettings, EmailTemplate  # noqa: F401
from gfportal.models.registration import Participant, WebhookEvent, WebhookStatus  # noqa: F401
