#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.domain.cart import total_quantity
from storefront.domain.errors import CartConflict, NotFound, ValidationFailed
from storefront.domain.schemas import (
    CartMutationOut,
    CartOut,
    CountOut,
    GuestCartIn,
    ItemIn,
    QuantityIn,
    SavedItemIn,
    SavedOut,
)
from storefront.services.cart_service import CartService
from storefront.services.token_service import AuthContext

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db)


def _mutation_error(e: Exception) -> HTTPException:
    if isinstance(e, NotFound):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, CartConflict):
        return HTTPException(status_code=409, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


def _cart_response(message: str, items: list) -> dict:
    return {
        "success": True,
        "message": message,
        "cart": items,
        "totalItems": total_quantity(items),
    }


#queries
@router.get("", response_model=CartOut)
def get_cart(ctx: AuthContext = Depends(get_current_user), svc: CartService = Depends(get_service)):
    items = svc.get_items(ctx.id)
    return {"success": True, "cart": items, "count": len(items)}


@router.get("/saved", response_model=SavedOut, response_model_exclude_none=True)
def get_saved(ctx: AuthContext = Depends(get_current_user), svc: CartService = Depends(get_service)):
    saved = svc.get_saved(ctx.id)
    return {"success": True, "savedItems": saved, "count": len(saved)}


@router.get("/count", response_model=CountOut)
def get_count(ctx: AuthContext = Depends(get_current_user), svc: CartService = Depends(get_service)):
    return {"success": True, "count": svc.count(ctx.id)}


#commands
@router.post("", response_model=CartMutationOut, response_model_exclude_none=True)
def add_item(
    payload: ItemIn,
    ctx: AuthContext = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        items = svc.add_item(ctx.id, payload.model_dump())
    except (ValidationFailed, CartConflict) as e:
        raise _mutation_error(e)
    return _cart_response("Item added to cart successfully", items)


@router.post("/save", response_model=SavedOut, response_model_exclude_none=True)
def save_for_later(
    payload: SavedItemIn,
    ctx: AuthContext = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        saved = svc.save_for_later(ctx.id, payload.model_dump())
    except CartConflict as e:
        raise _mutation_error(e)
    return {"success": True, "message": "Item saved for later", "savedItems": saved}


@router.post("/merge", response_model=CartMutationOut)
def merge_guest_cart(
    payload: GuestCartIn,
    ctx: AuthContext = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        items, saved = svc.merge_guest_cart(
            ctx.id,
            [i.model_dump() for i in payload.items],
            [s.model_dump() for s in payload.saved_items],
        )
    except (ValidationFailed, CartConflict) as e:
        raise _mutation_error(e)
    return {**_cart_response("Guest cart merged", items), "savedItems": saved}


@router.delete("/save/{item_id}", response_model=SavedOut, response_model_exclude_none=True)
def remove_saved(
    item_id: str,
    ctx: AuthContext = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        saved = svc.remove_saved(ctx.id, item_id)
    except (NotFound, CartConflict) as e:
        raise _mutation_error(e)
    return {"success": True, "message": "Item removed from saved for later", "savedItems": saved}


@router.put("/{item_id}", response_model=CartMutationOut, response_model_exclude_none=True)
def set_quantity(
    item_id: str,
    payload: QuantityIn,
    ctx: AuthContext = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        items = svc.set_quantity(ctx.id, item_id, payload.quantity)
    except (ValidationFailed, NotFound, CartConflict) as e:
        raise _mutation_error(e)
    return _cart_response("Item quantity updated", items)


@router.delete("/{item_id}", response_model=CartMutationOut, response_model_exclude_none=True)
def remove_item(
    item_id: str,
    ctx: AuthContext = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        items = svc.remove_item(ctx.id, item_id)
    except (NotFound, CartConflict) as e:
        raise _mutation_error(e)
    return _cart_response("Item removed from cart", items)


@router.delete("", response_model=CartMutationOut, response_model_exclude_none=True)
def clear_cart(ctx: AuthContext = Depends(get_current_user), svc: CartService = Depends(get_service)):
    try:
        items = svc.clear(ctx.id)
    except CartConflict as e:
        raise _mutation_error(e)
    return _cart_response("Cart cleared successfully", items)
