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
from decimal import Decimal
from typing import ClassVar

from django.contrib.auth.models import User
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from gfportal.models.base import BaseModel, ReplaceableModel, SingletonMixin


class CurrencyChoices(models.TextChoices):
    EUR = "EUR", "EUR"
    HUF = "HUF", "HUF"


class TransactionType(models.TextChoices):
    INCOME = "INCOME", _("Income")
    EXPENSE = "EXPENSE", _("Expense")


class PaymentMethod(models.TextChoices):
    BANK_TRANSFER = "bank transfer", _("Bank transfer")
    CARD = "card", _("Card")
    CASH = "cash", _("Cash")
    OTHER = "other", _("Other")


class SponsorshipStatus(models.TextChoices):
    PLEDGED = "pledged", _("Pledged")
    PARTIALLY_PAID = "partially_paid", _("Partially paid")
    PAID = "paid", _("Paid")
    CANCELLED = "cancelled", _("Cancelled")


class FinanceSettings(SingletonMixin, BaseModel):
    event_name = models.CharField(max_length=200, default="Global Friendship")

    default_currency = models.CharField(max_length=3, choices=CurrencyChoices.choices, default=CurrencyChoices.EUR)

    huf_to_eur_rate = models.DecimalField(
        max_digits=12,
        decimal_places=6,
        default=Decimal("0.0025"),
        validators=[MinValueValidator(Decimal("0.000001"))],
    )

    accounts = models.JSONField(default=list, blank=True)

    notes = models.TextField(blank=True, null=True)

    class Meta:
        ordering: ClassVar[list] = ["id"]
        verbose_name_plural = "Finance settings"


class BudgetItem(BaseModel):
    category_name = models.CharField(max_length=200)

    macro_category = models.CharField(max_length=200, db_index=True)

    unit_cost_original = models.DecimalField(max_digits=14, decimal_places=2)

    currency = models.CharField(max_length=3, choices=CurrencyChoices.choices, default=CurrencyChoices.EUR)

    quantity = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("1"))

    notes = models.TextField(blank=True, null=True)

    class Meta:
        ordering: ClassVar[list] = ["category_name"]

    def __str__(self):
        return f"{self.macro_category} / {self.category_name}"


class FinanceEntry(BaseModel):
    """Fields shared by money movements tracked against the budget."""

    description = models.TextField(blank=True, null=True)

    currency = models.CharField(max_length=3, choices=CurrencyChoices.choices, default=CurrencyChoices.EUR)

    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices, default=PaymentMethod.OTHER)

    account = models.CharField(max_length=200, blank=True, null=True)

    notes = models.TextField(blank=True, null=True)

    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, blank=True, null=True, related_name="+")

    updated_by = models.ForeignKey(User, on_delete=models.SET_NULL, blank=True, null=True, related_name="+")

    class Meta:
        abstract = True


class Transaction(FinanceEntry):
    transaction_type = models.CharField(max_length=10, choices=TransactionType.choices, default=TransactionType.EXPENSE)

    transaction_date = models.DateField()

    party = models.CharField(max_length=200, blank=True, null=True)

    amount_original = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        ordering: ClassVar[list] = ["-transaction_date"]


class Sponsorship(FinanceEntry):
    sponsor_name = models.CharField(max_length=200)

    pledged_amount_original = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))

    paid_amount_original = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))

    status = models.CharField(max_length=20, choices=SponsorshipStatus.choices, default=SponsorshipStatus.PLEDGED)

    expected_date = models.DateField(blank=True, null=True)

    received_date = models.DateField(blank=True, null=True)

    class Meta:
        ordering: ClassVar[list] = ["-created"]


class TransactionAllocation(ReplaceableModel):
    transaction = models.ForeignKey(Transaction, on_delete=models.CASCADE, related_name="allocations")

    budget_item = models.ForeignKey(BudgetItem, on_delete=models.CASCADE, related_name="transaction_allocations")

    amount_original = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        ordering: ClassVar[list] = ["created"]


class SponsorshipAllocation(ReplaceableModel):
    sponsorship = models.ForeignKey(Sponsorship, on_delete=models.CASCADE, related_name="allocations")

    budget_item = models.ForeignKey(BudgetItem, on_delete=models.CASCADE, related_name="sponsorship_allocations")

    amount_original = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        ordering: ClassVar[list] = ["created"]
