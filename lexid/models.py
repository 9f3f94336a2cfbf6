from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field


# === Domain objects used by the in-memory store ===


@dataclass
class Item:
    id: str
    list_id: str
    title: str
    sort_key: str
    created_at: datetime
    updated_at: datetime
    version: int = 0


@dataclass
class OrderedList:
    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    version: int = 0
    items: Dict[str, Item] = field(default_factory=dict)

    def ordered_items(self) -> list[Item]:
        return sorted(self.items.values(), key=lambda i: (i.sort_key, i.id))


# === API Schemas ===


class ListCreate(BaseModel):
    name: str = Field(min_length=1, max_length=140)


class ListOut(BaseModel):
    id: str
    name: str
    createdAt: datetime
    updatedAt: datetime
    version: int
    itemsCount: int


class ItemCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    afterItemId: Optional[str] = None
    beforeItemId: Optional[str] = None


class ItemMove(BaseModel):
    afterItemId: Optional[str] = None
    beforeItemId: Optional[str] = None
    expectedVersion: Optional[int] = None


class ItemOut(BaseModel):
    id: str
    listId: str
    title: str
    sortKey: str
    createdAt: datetime
    updatedAt: datetime
    version: int
