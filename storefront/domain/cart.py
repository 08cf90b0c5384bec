# storefront/domain/cart.py
"""
Cart reconciliation.

Plain functions over the JSON documents stored on a cart row. They never
mutate their arguments: each one returns a new list so a failed
compare-and-swap can simply re-run the merge against a fresh read.

An item is a dict ``{id, title, price, img, quantity}``; a saved item is the
same without ``quantity``.
"""
from typing import Any, Dict, List, Tuple

from storefront.domain.errors import NotFound, ValidationFailed

Item = Dict[str, Any]

CART_FIELDS = ("id", "title", "price", "img", "quantity")
SAVED_FIELDS = ("id", "title", "price", "img")


def _pick(item: Item, fields) -> Item:
    return {f: item[f] for f in fields}


def add_item(items: List[Item], incoming: Item) -> List[Item]:
    if incoming["quantity"] < 1:
        raise ValidationFailed("Quantity must be at least 1")

    result = []
    found = False
    for item in items:
        if item["id"] == incoming["id"]:
            item = {**item, "quantity": item["quantity"] + incoming["quantity"]}
            found = True
        result.append(item)

    if not found:
        result.append(_pick(incoming, CART_FIELDS))
    return result


def save_for_later(saved: List[Item], incoming: Item) -> List[Item]:
    #price and title are a snapshot, not checked against the active cart
    if any(s["id"] == incoming["id"] for s in saved):
        return list(saved)
    return [*saved, _pick(incoming, SAVED_FIELDS)]


def remove_item(items: List[Item], item_id: str) -> List[Item]:
    result = [i for i in items if i["id"] != item_id]
    if len(result) == len(items):
        raise NotFound("Item not found in cart")
    return result


def remove_saved(saved: List[Item], item_id: str) -> List[Item]:
    result = [s for s in saved if s["id"] != item_id]
    if len(result) == len(saved):
        raise NotFound("Item not found in saved items")
    return result


def set_quantity(items: List[Item], item_id: str, quantity: int) -> List[Item]:
    if quantity is None or quantity < 1:
        raise ValidationFailed("Quantity must be at least 1")

    if not any(i["id"] == item_id for i in items):
        raise NotFound("Item not found in cart")

    return [
        {**i, "quantity": quantity} if i["id"] == item_id else i
        for i in items
    ]


def clear(items: List[Item]) -> List[Item]:
    #saved items are left alone on purpose
    return []


def merge_guest_cart(
    items: List[Item],
    saved: List[Item],
    guest_items: List[Item],
    guest_saved: List[Item],
) -> Tuple[List[Item], List[Item]]:
    """Fold a cart collected before login into the persisted one."""
    for incoming in guest_items:
        items = add_item(items, incoming)
    for incoming in guest_saved:
        saved = save_for_later(saved, incoming)
    return items, saved


def total_quantity(items: List[Item]) -> int:
    return sum(i["quantity"] for i in items)
