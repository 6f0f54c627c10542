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
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from django.db import transaction as db_transaction

from gfportal.models.accounting import (
    BudgetItem,
    CurrencyChoices,
    FinanceSettings,
    PaymentMethod,
    Sponsorship,
    SponsorshipAllocation,
    SponsorshipStatus,
    Transaction,
    TransactionAllocation,
    TransactionType,
)
from gfportal.utils.exceptions import NotFoundError, ValidationApiError
from gfportal.utils.fees import parse_date_only

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

ALLOCATION_TOLERANCE = Decimal("0.01")

DEFAULT_HUF_TO_EUR_RATE = Decimal("0.0025")


def normalize_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def normalize_choice(value: Any, choices, default: str) -> str:
    """Return the value when it is one of the choices, else the default."""
    return value if value in choices.values else default


def normalize_currency(value: Any) -> str:
    return normalize_choice(value, CurrencyChoices, CurrencyChoices.EUR)


def normalize_payment_method(value: Any) -> str:
    return normalize_choice(value, PaymentMethod, PaymentMethod.OTHER)


def normalize_transaction_type(value: Any) -> str:
    return normalize_choice(value, TransactionType, TransactionType.EXPENSE)


def normalize_sponsorship_status(value: Any) -> str:
    return normalize_choice(value, SponsorshipStatus, SponsorshipStatus.PLEDGED)


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a JSON number or numeric string to a finite Decimal, or None."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def normalize_number(value: Any, fallback: Optional[Decimal] = Decimal("0")) -> Optional[Decimal]:
    """Round a numeric input to two decimals, using the fallback when not numeric."""
    number = to_decimal(value)
    if number is None:
        return fallback
    return number.quantize(CENT, rounding=ROUND_HALF_UP)


def normalize_date(value: Any):
    return parse_date_only(normalize_text(value))


def parse_allocations(value: Any) -> list[dict]:
    """Keep the well formed allocation rows: a known budget item and a positive amount."""
    if not isinstance(value, list):
        return []

    known_items = set(BudgetItem.objects.values_list("id", flat=True))
    rows = []
    for item in value:
        if not isinstance(item, dict):
            continue
        try:
            budget_item_id = int(str(item.get("budget_item_id")).strip())
        except ValueError:
            continue
        amount = normalize_number(item.get("amount_original"), None)
        if budget_item_id not in known_items or amount is None or amount <= 0:
            continue
        rows.append({"budget_item_id": budget_item_id, "amount_original": amount})
    return rows


def check_allocation_total(allocations: list[dict], total: Decimal) -> None:
    """Ensure allocations add up to the entry total.

    Raises:
        ValidationApiError: If the sums differ by more than one cent
    """
    allocated = sum((row["amount_original"] for row in allocations), Decimal("0"))
    if abs(allocated - total) > ALLOCATION_TOLERANCE:
        raise ValidationApiError(f"Allocations total ({allocated:.2f}) must match amount ({total:.2f})")


def _get_or_404(model, instance_id: Any, label: str):
    try:
        instance = model.objects.filter(pk=instance_id).first()
    except (ValueError, TypeError):
        instance = None
    if not instance:
        raise NotFoundError(f"{label} not found")
    return instance


def _require_id(instance_id: Any) -> Any:
    if instance_id in (None, ""):
        raise ValidationApiError("id is required")
    return instance_id


def load_finance_dataset() -> dict:
    """Return every finance table, serialized for the finance dashboard."""
    return {
        "settings": settings_to_json(FinanceSettings.load()),
        "budgetItems": [item.as_dict() for item in BudgetItem.objects.all()],
        "transactions": [entry.as_dict() for entry in Transaction.objects.all()],
        "transactionAllocations": [row.as_dict() for row in TransactionAllocation.objects.all()],
        "sponsorships": [entry.as_dict() for entry in Sponsorship.objects.all()],
        "sponsorshipAllocations": [row.as_dict() for row in SponsorshipAllocation.objects.all()],
    }


def settings_to_json(finance_settings: FinanceSettings) -> dict:
    data = finance_settings.as_dict()
    data["huf_to_eur_rate"] = float(finance_settings.huf_to_eur_rate)
    return data


def mutate_settings(action: str, data: dict, **kwargs) -> dict:
    """Update the singleton finance settings; other actions are rejected."""
    if action != "update":
        raise ValidationApiError("Settings can only be updated")

    rate = to_decimal(data.get("huf_to_eur_rate"))
    if rate is None:
        rate = DEFAULT_HUF_TO_EUR_RATE
    if rate <= 0:
        raise ValidationApiError("huf_to_eur_rate must be greater than 0")

    accounts = data.get("accounts")
    if not isinstance(accounts, list):
        accounts = []

    finance_settings = FinanceSettings.load()
    finance_settings.event_name = normalize_text(data.get("event_name")) or finance_settings.event_name
    finance_settings.default_currency = normalize_currency(data.get("default_currency"))
    finance_settings.huf_to_eur_rate = rate
    finance_settings.accounts = list(
        dict.fromkeys(account.strip() for account in accounts if isinstance(account, str) and account.strip())
    )
    finance_settings.notes = normalize_text(data.get("notes"))
    finance_settings.save()
    return {"ok": True, "settings": settings_to_json(finance_settings)}


def mutate_budget_item(action: str, data: dict, instance_id: Any = None, **kwargs) -> dict:
    if action == "delete":
        _get_or_404(BudgetItem, _require_id(instance_id), "Budget item").delete()
        return {"ok": True}

    values = {
        "category_name": normalize_text(data.get("category_name")),
        "macro_category": normalize_text(data.get("macro_category")),
        "unit_cost_original": normalize_number(data.get("unit_cost_original")),
        "currency": normalize_currency(data.get("currency")),
        "quantity": normalize_number(data.get("quantity"), Decimal("1")),
        "notes": normalize_text(data.get("notes")),
    }
    if not values["category_name"] or not values["macro_category"]:
        raise ValidationApiError("category_name and macro_category are required")
    if values["unit_cost_original"] < 0:
        raise ValidationApiError("unit_cost_original must be 0 or greater")
    if values["quantity"] <= 0:
        raise ValidationApiError("quantity must be greater than 0")

    if action == "create":
        item = BudgetItem.objects.create(**values)
    else:
        item = _get_or_404(BudgetItem, _require_id(instance_id), "Budget item")
        for field, value in values.items():
            setattr(item, field, value)
        item.save()

    return {"ok": True, "budgetItem": item.as_dict()}


def _replace_allocations(model, parent_field: str, parent, allocations: list[dict]) -> None:
    model.objects.filter(**{parent_field: parent}).delete()
    model.objects.bulk_create(
        [
            model(
                **{parent_field: parent},
                budget_item_id=row["budget_item_id"],
                amount_original=row["amount_original"],
            )
            for row in allocations
        ]
    )


def _save_entry(model, label: str, action: str, values: dict, instance_id: Any, user):
    if action == "create":
        return model.objects.create(**values, created_by=user, updated_by=user)

    entry = _get_or_404(model, _require_id(instance_id), label)
    for field, value in values.items():
        setattr(entry, field, value)
    entry.updated_by = user
    entry.save()
    return entry


def mutate_transaction(action: str, data: dict, instance_id: Any = None, allocations=None, user=None) -> dict:
    """Create, update or delete a transaction together with its allocations.

    Raises:
        ValidationApiError: If required fields are missing, the amount is not
            positive or the allocations do not match the amount
        NotFoundError: If the transaction does not exist
    """
    if action == "delete":
        _get_or_404(Transaction, _require_id(instance_id), "Transaction").delete()
        return {"ok": True}

    allocations = parse_allocations(allocations)
    values = {
        "transaction_type": normalize_transaction_type(data.get("transaction_type")),
        "transaction_date": normalize_date(data.get("transaction_date")),
        "description": normalize_text(data.get("description")),
        "party": normalize_text(data.get("party")),
        "amount_original": normalize_number(data.get("amount_original")),
        "currency": normalize_currency(data.get("currency")),
        "payment_method": normalize_payment_method(data.get("payment_method")),
        "account": normalize_text(data.get("account")),
        "notes": normalize_text(data.get("notes")),
    }
    if not values["transaction_date"] or not values["description"]:
        raise ValidationApiError("transaction_date and description are required")
    if values["amount_original"] <= 0:
        raise ValidationApiError("amount_original must be greater than 0")
    check_allocation_total(allocations, values["amount_original"])

    with db_transaction.atomic():
        entry = _save_entry(Transaction, "Transaction", action, values, instance_id, user)
        _replace_allocations(TransactionAllocation, "transaction", entry, allocations)

    return {"ok": True, "transaction": entry.as_dict()}


def mutate_sponsorship(action: str, data: dict, instance_id: Any = None, allocations=None, user=None) -> dict:
    """Create, update or delete a sponsorship; allocations must cover the pledged amount."""
    if action == "delete":
        _get_or_404(Sponsorship, _require_id(instance_id), "Sponsorship").delete()
        return {"ok": True}

    allocations = parse_allocations(allocations)
    values = {
        "sponsor_name": normalize_text(data.get("sponsor_name")),
        "description": normalize_text(data.get("description")),
        "pledged_amount_original": normalize_number(data.get("pledged_amount_original")),
        "paid_amount_original": normalize_number(data.get("paid_amount_original")),
        "currency": normalize_currency(data.get("currency")),
        "status": normalize_sponsorship_status(data.get("status")),
        "expected_date": normalize_date(data.get("expected_date")),
        "received_date": normalize_date(data.get("received_date")),
        "payment_method": normalize_payment_method(data.get("payment_method")),
        "account": normalize_text(data.get("account")),
        "notes": normalize_text(data.get("notes")),
    }
    if not values["sponsor_name"]:
        raise ValidationApiError("sponsor_name is required")
    check_allocation_total(allocations, values["pledged_amount_original"])

    with db_transaction.atomic():
        entry = _save_entry(Sponsorship, "Sponsorship", action, values, instance_id, user)
        _replace_allocations(SponsorshipAllocation, "sponsorship", entry, allocations)

    return {"ok": True, "sponsorship": entry.as_dict()}


FINANCE_MUTATIONS = {
    "settings": mutate_settings,
    "budget_item": mutate_budget_item,
    "transaction": mutate_transaction,
    "sponsorship": mutate_sponsorship,
}

FINANCE_ACTIONS = {"create", "update", "delete"}


def apply_finance_mutation(payload: dict, user) -> dict:
    """Dispatch a finance mutation request to the handler of its entity.

    Args:
        payload: Request body with entity, action, id, data and allocations
        user: User performing the change, recorded on entries

    Returns:
        The handler result, always including ``ok``

    Raises:
        ValidationApiError: If the entity or action is not supported
    """
    handler = FINANCE_MUTATIONS.get(payload.get("entity"))
    if not handler:
        raise ValidationApiError("Unsupported entity")

    action = payload.get("action")
    if action not in FINANCE_ACTIONS:
        raise ValidationApiError("Unsupported action")

    data = payload.get("data")
    if not isinstance(data, dict):
        data = {}

    result = handler(action, data, instance_id=payload.get("id"), allocations=payload.get("allocations"), user=user)
    logger.info(f"Finance {payload['entity']} {action} by {user}")
    return result
