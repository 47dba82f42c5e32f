"""Cart storage for the storefront"""

import asyncio
import itertools
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from ..core.config import settings
from ..core.errors import InvalidQuantity, LineNotFound, Timeout
from ..models.cart import CartLine
from ..models.owner import OwnerKey

logger = logging.getLogger(__name__)


def validate_quantity(quantity) -> int:
    """Reject anything that is not a positive integer"""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidQuantity(quantity)
    return quantity


def _variant(value: Optional[str]) -> Optional[str]:
    # An empty size/color is the same variant as no size/color
    return value or None


class LockedCart:
    """
    View of one owner's cart while the caller holds its lock.

    Handed out by ``CartDatabase.checkout``; operations here must not
    re-acquire the owner lock.
    """

    def __init__(self, db: "CartDatabase", owner: OwnerKey):
        self._db = db
        self.owner = owner

    def lines(self) -> list[CartLine]:
        return self._db._lines_for(self.owner)

    def clear(self) -> None:
        self._db._clear_unlocked(self.owner)


class CartDatabase:
    """
    In-memory cart storage, partitioned by owner.

    Every mutation for an owner runs as one critical section under that
    owner's lock, so concurrent adds for the same line identity merge
    instead of overwriting each other.
    """

    def __init__(self, lock_timeout: float = 5.0):
        self.lock_timeout = lock_timeout
        self._carts: dict[OwnerKey, dict[int, CartLine]] = {}
        self._locks: dict[OwnerKey, asyncio.Lock] = {}
        # Tasks holding or waiting for each owner's lock
        self._lock_users: dict[OwnerKey, int] = {}
        self._line_ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------

    def _lock_for(self, owner: OwnerKey) -> asyncio.Lock:
        return self._locks.setdefault(owner, asyncio.Lock())

    async def _acquire(self, owner: OwnerKey, lock: asyncio.Lock) -> None:
        try:
            async with asyncio.timeout(self.lock_timeout):
                await lock.acquire()
        except TimeoutError:
            logger.warning(f"Timed out waiting for cart lock of {owner}")
            raise Timeout(f"Cart for {owner} is busy, please retry") from None

    def _forget_lock(self, owner: OwnerKey) -> None:
        # Drop the lock of an empty cart once nobody holds or awaits it
        remaining = self._lock_users.pop(owner, 1) - 1
        if remaining:
            self._lock_users[owner] = remaining
            return
        if owner not in self._carts:
            self._locks.pop(owner, None)

    @asynccontextmanager
    async def _owner_lock(self, owner: OwnerKey) -> AsyncIterator[None]:
        lock = self._lock_for(owner)
        self._lock_users[owner] = self._lock_users.get(owner, 0) + 1
        try:
            await self._acquire(owner, lock)
            try:
                yield
            finally:
                lock.release()
        finally:
            self._forget_lock(owner)

    @asynccontextmanager
    async def checkout(self, owner: OwnerKey) -> AsyncIterator[LockedCart]:
        """Hold the owner's cart lock for a multi-step operation"""
        async with self._owner_lock(owner):
            yield LockedCart(self, owner)

    # ------------------------------------------------------------------
    # Unlocked primitives (callers hold the owner lock)
    # ------------------------------------------------------------------

    def _lines_for(self, owner: OwnerKey) -> list[CartLine]:
        return list(self._carts.get(owner, {}).values())

    def _upsert(
        self,
        owner: OwnerKey,
        product_id: str,
        quantity: int,
        size: Optional[str],
        color: Optional[str],
        created_at: Optional[datetime] = None,
    ) -> CartLine:
        cart = self._carts.setdefault(owner, {})
        identity = (product_id, size, color)

        existing = next(
            (line for line in cart.values() if line.identity == identity),
            None,
        )

        if existing:
            merged = existing.model_copy(update={"quantity": existing.quantity + quantity})
            cart[existing.id] = merged
            return merged

        line = CartLine(
            id=next(self._line_ids),
            product_id=product_id,
            quantity=quantity,
            size=size,
            color=color,
            created_at=created_at or datetime.now(timezone.utc),
        )
        cart[line.id] = line
        return line

    def _clear_unlocked(self, owner: OwnerKey) -> None:
        self._carts.pop(owner, None)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def add(
        self,
        owner: OwnerKey,
        product_id: str,
        quantity: int,
        size: Optional[str] = None,
        color: Optional[str] = None,
    ) -> CartLine:
        """Add a product variant, adding to the quantity of a matching line"""
        validate_quantity(quantity)
        async with self._owner_lock(owner):
            return self._upsert(owner, product_id, quantity, _variant(size), _variant(color))

    async def update_quantity(self, owner: OwnerKey, line_id: int, quantity: int) -> CartLine:
        """Set the quantity of one of the owner's lines"""
        validate_quantity(quantity)
        async with self._owner_lock(owner):
            cart = self._carts.get(owner, {})
            line = cart.get(line_id)
            if line is None:
                raise LineNotFound(line_id)
            updated = line.model_copy(update={"quantity": quantity})
            cart[line_id] = updated
            return updated

    async def remove(self, owner: OwnerKey, line_id: int) -> None:
        """Remove a line; removing an absent line is a no-op"""
        async with self._owner_lock(owner):
            cart = self._carts.get(owner)
            if cart is not None:
                cart.pop(line_id, None)
                if not cart:
                    del self._carts[owner]

    async def clear(self, owner: OwnerKey) -> None:
        """Remove every line of the owner's cart"""
        async with self._owner_lock(owner):
            self._clear_unlocked(owner)

    async def list_lines(self, owner: OwnerKey) -> list[CartLine]:
        """Lines of the owner's cart in insertion order"""
        return self._lines_for(owner)

    async def merge(self, source: OwnerKey, target: OwnerKey) -> list[CartLine]:
        """
        Move every line of ``source`` into ``target``.

        Lines with the same (product, size, color) identity have their
        quantities added. ``source`` is left empty. Both carts are locked
        in a fixed order so two opposite merges cannot deadlock.
        """
        if source == target:
            return self._lines_for(target)

        first, second = sorted((source, target), key=str)
        async with self._owner_lock(first), self._owner_lock(second):
            moved = self._lines_for(source)
            for line in moved:
                self._upsert(
                    target,
                    line.product_id,
                    line.quantity,
                    line.size,
                    line.color,
                    created_at=line.created_at,
                )
            self._clear_unlocked(source)
            if moved:
                logger.info(f"Merged {len(moved)} cart lines from {source} into {target}")
            return self._lines_for(target)

    def reset(self) -> None:
        """Drop all carts"""
        self._carts.clear()
        self._locks.clear()
        self._lock_users.clear()


# Singleton instance
cart_db = CartDatabase(lock_timeout=settings.storage_timeout_seconds)
