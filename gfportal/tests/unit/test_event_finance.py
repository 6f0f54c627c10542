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

"""Tests for the event finance dataset and its mutations"""

from decimal import Decimal

import pytest

from gfportal.models.access import RoleChoices
from gfportal.models.accounting import (
    BudgetItem,
    FinanceSettings,
    Sponsorship,
    SponsorshipAllocation,
    Transaction,
    TransactionAllocation,
)
from gfportal.tests.unit.base import BaseTestCase
from gfportal.utils.exceptions import NotFoundError, ValidationApiError
from gfportal.utils.finance import apply_finance_mutation, parse_allocations

FINANCE_URL = "/api/manager/event-finance"


class TestFinanceMutations(BaseTestCase):
    def create_budget_item(self, **kwargs):
        defaults = {"category_name": "Meals", "macro_category": "Food", "unit_cost_original": Decimal("10")}
        defaults.update(kwargs)
        return BudgetItem.objects.create(**defaults)

    def test_update_settings(self):
        result = apply_finance_mutation(
            {
                "entity": "settings",
                "action": "update",
                "data": {
                    "event_name": " Global Friendship 2026 ",
                    "default_currency": "HUF",
                    "huf_to_eur_rate": "0.0026",
                    "accounts": [" Bank ", "Bank", 3, "Cash", ""],
                },
            },
            None,
        )

        assert result["settings"]["event_name"] == "Global Friendship 2026"
        assert result["settings"]["huf_to_eur_rate"] == 0.0026
        settings_row = FinanceSettings.load()
        assert settings_row.default_currency == "HUF"
        assert settings_row.accounts == ["Bank", "Cash"]

    def test_settings_rules(self):
        with pytest.raises(ValidationApiError, match="Settings can only be updated"):
            apply_finance_mutation({"entity": "settings", "action": "create"}, None)
        with pytest.raises(ValidationApiError, match="huf_to_eur_rate must be greater than 0"):
            apply_finance_mutation({"entity": "settings", "action": "update", "data": {"huf_to_eur_rate": -1}}, None)

    def test_budget_item_lifecycle(self):
        created = apply_finance_mutation(
            {
                "entity": "budget_item",
                "action": "create",
                "data": {"category_name": "Buses", "macro_category": "Transport", "unit_cost_original": "1200.555"},
            },
            None,
        )["budgetItem"]
        assert created["unit_cost_original"] == 1200.56
        assert created["quantity"] == 1.0
        assert created["currency"] == "EUR"

        updated = apply_finance_mutation(
            {
                "entity": "budget_item",
                "action": "update",
                "id": created["id"],
                "data": {"category_name": "Buses", "macro_category": "Transport", "quantity": 3, "currency": "HUF"},
            },
            None,
        )["budgetItem"]
        assert updated["quantity"] == 3.0
        assert updated["unit_cost_original"] == 0.0

        apply_finance_mutation({"entity": "budget_item", "action": "delete", "id": created["id"]}, None)
        assert not BudgetItem.objects.exists()

    def test_budget_item_validation(self):
        with pytest.raises(ValidationApiError, match="category_name and macro_category are required"):
            apply_finance_mutation({"entity": "budget_item", "action": "create", "data": {"category_name": "X"}}, None)
        with pytest.raises(ValidationApiError, match="quantity must be greater than 0"):
            apply_finance_mutation(
                {
                    "entity": "budget_item",
                    "action": "create",
                    "data": {"category_name": "X", "macro_category": "Y", "quantity": 0},
                },
                None,
            )

    def test_transaction_with_allocations(self):
        profile = self.create_profile(role=RoleChoices.MANAGER)
        meals = self.create_budget_item()
        rooms = self.create_budget_item(category_name="Rooms", macro_category="Lodging")
        payload = {
            "entity": "transaction",
            "action": "create",
            "data": {
                "transaction_type": "EXPENSE",
                "transaction_date": "2026-05-10",
                "description": "Deposit",
                "amount_original": 100,
                "payment_method": "bank transfer",
            },
            "allocations": [
                {"budget_item_id": meals.id, "amount_original": 60},
                {"budget_item_id": str(rooms.id), "amount_original": "40.004"},
            ],
        }

        result = apply_finance_mutation(payload, profile.user)

        transaction = Transaction.objects.get(pk=result["transaction"]["id"])
        assert transaction.created_by == profile.user
        assert transaction.payment_method == "bank transfer"
        assert TransactionAllocation.objects.filter(transaction=transaction).count() == 2

        payload.update(
            {
                "action": "update",
                "id": transaction.id,
                "allocations": [{"budget_item_id": rooms.id, "amount_original": 100}],
            }
        )
        apply_finance_mutation(payload, profile.user)

        allocations = list(TransactionAllocation.objects.filter(transaction=transaction))
        assert [(row.budget_item_id, row.amount_original) for row in allocations] == [(rooms.id, Decimal("100"))]

    def test_transaction_allocations_must_match_amount(self):
        meals = self.create_budget_item()
        payload = {
            "entity": "transaction",
            "action": "create",
            "data": {"transaction_date": "2026-05-10", "description": "Deposit", "amount_original": 100},
            "allocations": [{"budget_item_id": meals.id, "amount_original": 50}],
        }

        with pytest.raises(ValidationApiError, match=r"Allocations total \(50.00\) must match amount \(100.00\)"):
            apply_finance_mutation(payload, None)
        assert not Transaction.objects.exists()

    @pytest.mark.parametrize(
        "data,message",
        [
            ({"description": "Deposit", "amount_original": 10}, "transaction_date and description are required"),
            ({"transaction_date": "10/05/2026", "description": "Deposit"}, "transaction_date and description"),
            ({"transaction_date": "2026-05-10", "description": "Deposit"}, "amount_original must be greater than 0"),
        ],
    )
    def test_transaction_validation(self, data, message):
        with pytest.raises(ValidationApiError, match=message):
            apply_finance_mutation({"entity": "transaction", "action": "create", "data": data}, None)

    def test_parse_allocations_drops_invalid_rows(self):
        meals = self.create_budget_item()

        rows = parse_allocations(
            [
                {"budget_item_id": meals.id, "amount_original": "12.5"},
                {"budget_item_id": 9999, "amount_original": 10},
                {"budget_item_id": "abc", "amount_original": 10},
                {"budget_item_id": meals.id, "amount_original": 0},
                "garbage",
            ]
        )

        assert rows == [{"budget_item_id": meals.id, "amount_original": Decimal("12.50")}]

    def test_sponsorship(self):
        meals = self.create_budget_item()

        result = apply_finance_mutation(
            {
                "entity": "sponsorship",
                "action": "create",
                "data": {
                    "sponsor_name": "Foundation",
                    "pledged_amount_original": 500,
                    "paid_amount_original": 200,
                    "status": "partially_paid",
                    "expected_date": "2026-06-01",
                },
                "allocations": [{"budget_item_id": meals.id, "amount_original": 500}],
            },
            None,
        )

        sponsorship = Sponsorship.objects.get(pk=result["sponsorship"]["id"])
        assert sponsorship.status == "partially_paid"
        assert result["sponsorship"]["expected_date"] == "2026-06-01"
        assert SponsorshipAllocation.objects.get().amount_original == Decimal("500")

        with pytest.raises(ValidationApiError, match="sponsor_name is required"):
            apply_finance_mutation({"entity": "sponsorship", "action": "create", "data": {}}, None)

    def test_dispatch_errors(self):
        with pytest.raises(ValidationApiError, match="Unsupported entity"):
            apply_finance_mutation({"entity": "invoice", "action": "create"}, None)
        with pytest.raises(ValidationApiError, match="Unsupported action"):
            apply_finance_mutation({"entity": "transaction", "action": "archive"}, None)
        with pytest.raises(ValidationApiError, match="id is required"):
            apply_finance_mutation({"entity": "transaction", "action": "delete"}, None)
        with pytest.raises(NotFoundError, match="Transaction not found"):
            apply_finance_mutation({"entity": "transaction", "action": "delete", "id": 999}, None)
        with pytest.raises(NotFoundError, match="Sponsorship not found"):
            apply_finance_mutation({"entity": "sponsorship", "action": "delete", "id": "abc"}, None)


class TestEventFinanceEndpoint(BaseTestCase):
    def test_dataset(self):
        client, _profile = self.login_client()
        BudgetItem.objects.create(category_name="Meals", macro_category="Food", unit_cost_original=Decimal("10"))

        data = client.get(FINANCE_URL).json()

        assert data["settings"]["event_name"] == "Global Friendship"
        assert data["settings"]["huf_to_eur_rate"] == 0.0025
        assert [item["category_name"] for item in data["budgetItems"]] == ["Meals"]
        assert data["transactions"] == []

    def test_mutation(self):
        client, profile = self.login_client()
        item = BudgetItem.objects.create(category_name="Fees", macro_category="Income", unit_cost_original=Decimal("250"))

        response = self.send_json(
            client,
            "post",
            FINANCE_URL,
            {
                "entity": "transaction",
                "action": "create",
                "data": {
                    "transaction_type": "INCOME",
                    "transaction_date": "2026-05-10",
                    "description": "Fees",
                    "amount_original": "250",
                },
                "allocations": [{"budget_item_id": item.id, "amount_original": 250}],
            },
        )

        assert response.status_code == 200
        assert response.json()["transaction"]["transaction_type"] == "INCOME"
        assert Transaction.objects.get().created_by == profile.user

    def test_validation_error_is_json(self):
        client, _profile = self.login_client()

        response = self.send_json(client, "post", FINANCE_URL, {"entity": "invoice"})

        assert response.status_code == 400
        assert response.json() == {"error": "Unsupported entity"}

    def test_admin_cannot_access_finance(self):
        client, _profile = self.login_client(RoleChoices.ADMIN)

        assert client.get(FINANCE_URL).status_code == 403
