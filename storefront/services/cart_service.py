# storefront/services/cart_service.py
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Tuple

from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.domain import cart as reconcile
from storefront.domain.errors import CartConflict
from storefront.repos.cart_repo import CartRepo
from storefront.utils.retry import cart_conflict_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

Item = Dict[str, Any]
Mutation = Callable[[List[Item], List[Item]], Tuple[List[Item], List[Item]]]


class CartService:
    """
    Commands (add, save, remove, set quantity, clear, merge) change state,
    queries (items, saved, count) only read.

    Every command reads the user's cart, runs one of the reconciliation
    functions over the stored documents and writes both lists back in a
    single compare-and-swap on ``version``. Losing the swap re-runs the whole
    read-merge-write.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)

    #queries
    def _load(self, user_id: int) -> Tuple[List[Item], List[Item]]:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            return [], []
        return list(cart.items or []), list(cart.saved_items or [])

    def get_items(self, user_id: int) -> List[Item]:
        return self._load(user_id)[0]

    def get_saved(self, user_id: int) -> List[Item]:
        return self._load(user_id)[1]

    def count(self, user_id: int) -> int:
        return reconcile.total_quantity(self.get_items(user_id))

    #commands
    def add_item(self, user_id: int, item: Item) -> List[Item]:
        logger.info(f"Adding {item['id']} x{item['quantity']} to cart of user {user_id}")
        items, _ = self._mutate(
            user_id, lambda items, saved: (reconcile.add_item(items, item), saved)
        )
        return items

    def save_for_later(self, user_id: int, item: Item) -> List[Item]:
        logger.info(f"Saving {item['id']} for later for user {user_id}")
        _, saved = self._mutate(
            user_id, lambda items, saved: (items, reconcile.save_for_later(saved, item))
        )
        return saved

    def remove_item(self, user_id: int, item_id: str) -> List[Item]:
        logger.info(f"Removing {item_id} from cart of user {user_id}")
        items, _ = self._mutate(
            user_id, lambda items, saved: (reconcile.remove_item(items, item_id), saved)
        )
        return items

    def remove_saved(self, user_id: int, item_id: str) -> List[Item]:
        logger.info(f"Removing {item_id} from saved items of user {user_id}")
        _, saved = self._mutate(
            user_id, lambda items, saved: (items, reconcile.remove_saved(saved, item_id))
        )
        return saved

    def set_quantity(self, user_id: int, item_id: str, quantity: int) -> List[Item]:
        logger.info(f"Setting quantity of {item_id} to {quantity} for user {user_id}")
        items, _ = self._mutate(
            user_id,
            lambda items, saved: (reconcile.set_quantity(items, item_id, quantity), saved),
        )
        return items

    def clear(self, user_id: int) -> List[Item]:
        logger.info(f"Clearing cart of user {user_id}")
        items, _ = self._mutate(
            user_id, lambda items, saved: (reconcile.clear(items), saved)
        )
        return items

    def merge_guest_cart(
        self, user_id: int, guest_items: List[Item], guest_saved: List[Item]
    ) -> Tuple[List[Item], List[Item]]:
        logger.info(
            f"Merging guest cart ({len(guest_items)} items, {len(guest_saved)} saved) "
            f"into cart of user {user_id}"
        )
        return self._mutate(
            user_id,
            lambda items, saved: reconcile.merge_guest_cart(items, saved, guest_items, guest_saved),
        )

    def _mutate(self, user_id: int, mutation: Mutation) -> Tuple[List[Item], List[Item]]:
        @cart_conflict_retry()
        def attempt():
            cart = self.repo.get_cart_by_user(user_id)
            items, saved = (
                (list(cart.items or []), list(cart.saved_items or [])) if cart else ([], [])
            )

            #NotFound / ValidationFailed propagate from here, nothing gets written
            new_items, new_saved = mutation(items, saved)
            now = datetime.now(timezone.utc)

            if cart is None:
                self.repo.create_cart(
                    CartModel(
                        user_id=user_id,
                        items=new_items,
                        saved_items=new_saved,
                        version=1,
                        updated_at=now,
                    )
                )
            else:
                # Optimistic locking
                rowcount = self.repo.update_cart_version(
                    cart_id=cart.id,
                    old_version=cart.version,
                    new_data={
                        "items": new_items,
                        "saved_items": new_saved,
                        "version": cart.version + 1,
                        "updated_at": now,
                    },
                )
                if rowcount == 0:
                    self.repo.rollback()
                    logger.warning(f"Cart {cart.id} changed underneath us (version {cart.version})")
                    raise CartConflict(
                        "Cart was modified by another request, please try again"
                    )

            self.repo.commit()
            return new_items, new_saved

        return attempt()
