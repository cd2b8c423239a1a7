# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
Collection Kinds — The orderable resources sharing one manager.

A kind pairs a container model with its item model and the payload schema
used to validate new items. ``owner_scoped`` kinds are private to the
container's owner inside the restaurant (prep boards are per cook).
Items of ``publishable`` kinds carry ``is_published`` and can be toggled
live on the public site.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, Field

from mise_os.storage.models import (
    ContentBlock,
    NavigationItem,
    NavigationMenu,
    Page,
    PrepBoard,
    PrepColumn,
)


class PrepColumnPayload(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    color: str = Field(default="#1976d2", max_length=16)


class ContentBlockPayload(BaseModel):
    block_type: str = Field(min_length=1, max_length=64)
    title: Optional[str] = Field(default=None, max_length=256)
    content: Optional[Dict[str, Any]] = None
    is_published: bool = False


class NavigationItemPayload(BaseModel):
    label: str = Field(min_length=1, max_length=128)
    url: str = Field(min_length=1)
    open_in_new_tab: bool = False


@dataclass(frozen=True)
class CollectionKind:
    name: str
    container_model: Type
    item_model: Type
    payload_schema: Type[BaseModel]
    container_label: str
    item_label: str
    owner_scoped: bool = False
    publishable: bool = False

    def build_item(self, container_id: int, order: int, payload: Dict[str, Any]):
        """Instantiate an item row from an already-validated payload."""
        return self.item_model(container_id=container_id, display_order=order, **payload)

    def validate_payload(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.payload_schema.model_validate(data).model_dump()


PREP_BOARDS = CollectionKind(
    name="prep-boards",
    container_model=PrepBoard,
    item_model=PrepColumn,
    payload_schema=PrepColumnPayload,
    container_label="Prep board",
    item_label="Prep column",
    owner_scoped=True,
)

PAGES = CollectionKind(
    name="pages",
    container_model=Page,
    item_model=ContentBlock,
    payload_schema=ContentBlockPayload,
    container_label="Page",
    item_label="Content block",
    publishable=True,
)

NAVIGATION = CollectionKind(
    name="navigation",
    container_model=NavigationMenu,
    item_model=NavigationItem,
    payload_schema=NavigationItemPayload,
    container_label="Navigation menu",
    item_label="Navigation item",
)

COLLECTION_KINDS: Dict[str, CollectionKind] = {
    kind.name: kind for kind in (PREP_BOARDS, PAGES, NAVIGATION)
}
