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

from gfportal.admin.base import DefModelAdmin, ReadOnlyInline
from gfportal.models.accounting import (
    BudgetItem,
    FinanceSettings,
    Sponsorship,
    SponsorshipAllocation,
    Transaction,
    TransactionAllocation,
)


class TransactionAllocationInline(ReadOnlyInline):
    model = TransactionAllocation
    fields = ("budget_item", "amount_original")
    readonly_fields = ("budget_item", "amount_original")


class SponsorshipAllocationInline(ReadOnlyInline):
    model = SponsorshipAllocation
    fields = ("budget_item", "amount_original")
    readonly_fields = ("budget_item", "amount_original")


@admin.register(FinanceSettings)
class FinanceSettingsAdmin(DefModelAdmin):
    list_display = ("event_name", "default_currency", "huf_to_eur_rate")


@admin.register(BudgetItem)
class BudgetItemAdmin(DefModelAdmin):
    list_display: ClassVar[tuple] = ("macro_category", "category_name", "unit_cost_original", "currency", "quantity")
    search_fields: ClassVar[list] = ["category_name", "macro_category"]
    list_filter = ("macro_category", "currency")


@admin.register(Transaction)
class TransactionAdmin(DefModelAdmin):
    """Admin interface for Transaction model.

    Allocations are shown read only, as they must always sum to the amount.
    """

    list_display: ClassVar[tuple] = (
        "transaction_date",
        "transaction_type",
        "description",
        "amount_original",
        "currency",
        "payment_method",
    )
    search_fields: ClassVar[list] = ["description", "party"]
    list_filter = ("transaction_type", "currency", "payment_method")
    inlines: ClassVar[list] = [TransactionAllocationInline]


@admin.register(Sponsorship)
class SponsorshipAdmin(DefModelAdmin):
    list_display: ClassVar[tuple] = ("sponsor_name", "status", "pledged_amount_original", "paid_amount_original")
    search_fields: ClassVar[list] = ["sponsor_name"]
    list_filter = ("status", "currency")
    inlines: ClassVar[list] = [SponsorshipAllocationInline]
