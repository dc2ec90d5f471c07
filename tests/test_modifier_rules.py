import uuid
from decimal import Decimal

import pytest

from app import crud
from app.core.exceptions import ValidationError
from app.db.models.menu import ModifierStatus
from app.services.order_service import generate_order_number, money, resolve_modifiers


async def load_pho(db, menu):
    return await crud.menu.get_item(db, menu.pho.id)


async def test_valid_selection_sums_adjustments_and_snapshots_names(db, menu):
    pho = await load_pho(db, menu)
    total, snapshot = resolve_modifiers(pho, [menu.options["Large"], menu.options["Egg"], menu.options["Beef"]])
    assert total == Decimal("6.50")
    assert {(m.modifier_group_name, m.modifier_option_name) for m in snapshot} == {
        ("Size", "Large"), ("Toppings", "Egg"), ("Toppings", "Beef"),
    }


async def test_required_group_needs_a_selection(db, menu):
    pho = await load_pho(db, menu)
    with pytest.raises(ValidationError, match="\"Size\" is required"):
        resolve_modifiers(pho, [menu.options["Egg"]])


async def test_single_group_rejects_two_options(db, menu):
    pho = await load_pho(db, menu)
    with pytest.raises(ValidationError, match="maximum 1|single selection"):
        resolve_modifiers(pho, [menu.options["Regular"], menu.options["Large"]])


async def test_max_selections_enforced(db, menu):
    pho = await load_pho(db, menu)
    with pytest.raises(ValidationError, match="allows maximum 2"):
        resolve_modifiers(
            pho, [menu.options["Regular"], menu.options["Egg"], menu.options["Beef"], menu.options["Herbs"]]
        )


async def test_duplicate_option_rejected(db, menu):
    pho = await load_pho(db, menu)
    with pytest.raises(ValidationError, match="Duplicate"):
        resolve_modifiers(pho, [menu.options["Regular"], menu.options["Egg"], menu.options["Egg"]])


async def test_option_from_another_item_rejected(db, menu):
    tea = await crud.menu.get_item(db, menu.tea.id)
    with pytest.raises(ValidationError, match="not valid"):
        resolve_modifiers(tea, [menu.options["Egg"]])
    with pytest.raises(ValidationError, match="not valid"):
        resolve_modifiers(tea, [uuid.uuid4()])


async def test_inactive_option_rejected(db, menu):
    pho = await load_pho(db, menu)
    for group in pho.modifier_groups:
        for option in group.options:
            if option.name == "Beef":
                option.status = ModifierStatus.INACTIVE
    with pytest.raises(ValidationError):
        resolve_modifiers(pho, [menu.options["Regular"], menu.options["Beef"]])


async def test_item_without_groups_accepts_no_modifiers(db, menu):
    tea = await crud.menu.get_item(db, menu.tea.id)
    assert resolve_modifiers(tea, []) == (Decimal("0"), [])


def test_money_rounds_half_up_to_cents():
    assert money("1.005") == Decimal("1.01")
    assert money(Decimal("2")) == Decimal("2.00")


def test_order_number_format():
    number = generate_order_number()
    date_part, suffix = number.split("-")
    assert len(date_part) == 6 and date_part.isdigit()
    assert len(suffix) == 6 and suffix.isalnum() and suffix.upper() == suffix
