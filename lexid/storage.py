from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional

from .config import build_generator
from .generator import Lexid
from .models import Item, OrderedList
from .utils import new_uuid

logger = logging.getLogger("lexid.storage")


class PlacementError(ValueError):
    """Neighbour items are unknown or not in order."""


class Storage:
    """In-memory store for ordered lists.

    Item positions are generator keys; inserting or moving an item only
    writes that item's key. Placing a key and writing it happen under one
    lock so concurrent requests never receive the same key.
    """

    def __init__(self, keys: Lexid) -> None:
        self.keys = keys
        self.lists: Dict[str, OrderedList] = {}
        self._lock = threading.Lock()

    # === List operations ===
    def create_list(self, name: str) -> OrderedList:
        now = datetime.now(timezone.utc)
        lst = OrderedList(
            id=new_uuid(),
            name=name.strip(),
            created_at=now,
            updated_at=now,
            version=1,
        )
        self.lists[lst.id] = lst
        return lst

    def get_list(self, list_id: str) -> OrderedList:
        return self.lists[list_id]

    def delete_list(self, list_id: str) -> None:
        del self.lists[list_id]

    # === Item operations ===
    def create_item(
        self,
        lst: OrderedList,
        title: str,
        after_id: Optional[str],
        before_id: Optional[str],
    ) -> Item:
        with self._lock:
            now = datetime.now(timezone.utc)
            item = Item(
                id=new_uuid(),
                list_id=lst.id,
                title=title.strip(),
                sort_key=self._place(lst, after_id, before_id),
                created_at=now,
                updated_at=now,
                version=1,
            )
            lst.items[item.id] = item
            lst.version += 1
            lst.updated_at = now
        return item

    def move_item(
        self,
        lst: OrderedList,
        item: Item,
        after_id: Optional[str],
        before_id: Optional[str],
    ) -> Item:
        with self._lock:
            item.sort_key = self._place(lst, after_id, before_id, moving=item.id)
            now = datetime.now(timezone.utc)
            item.updated_at = now
            item.version += 1
            lst.version += 1
            lst.updated_at = now
        return item

    def delete_item(self, lst: OrderedList, item_id: str) -> None:
        with self._lock:
            del lst.items[item_id]
            lst.version += 1
            lst.updated_at = datetime.now(timezone.utc)

    def _place(
        self,
        lst: OrderedList,
        after_id: Optional[str],
        before_id: Optional[str],
        moving: Optional[str] = None,
    ) -> str:
        items: List[Item] = [i for i in lst.ordered_items() if i.id != moving]
        position = {item.id: pos for pos, item in enumerate(items)}
        for neighbour in (after_id, before_id):
            if neighbour is not None and neighbour not in position:
                raise PlacementError(f"unknown item {neighbour!r}")

        if after_id is None and before_id is None:
            if not items:
                return self.keys.middle()
            return self.keys.next(items[-1].sort_key)

        if after_id is not None and before_id is not None:
            if position[before_id] != position[after_id] + 1:
                raise PlacementError(f"items {after_id!r} and {before_id!r} are not neighbours")
            left: Optional[Item] = items[position[after_id]]
            right: Optional[Item] = items[position[before_id]]
        elif after_id is not None:
            pos = position[after_id]
            left = items[pos]
            right = items[pos + 1] if pos + 1 < len(items) else None
        else:
            pos = position[before_id]
            left = items[pos - 1] if pos > 0 else None
            right = items[pos]

        if right is None:
            return self.keys.next(left.sort_key)
        key = self.keys.next_before(left.sort_key if left else "", right.sort_key)
        logger.debug("placed key %r in list %s", key, lst.id)
        return key


storage = Storage(build_generator())
