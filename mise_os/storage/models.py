# Copyright (c) 2026 Mise OS Contributors. All Rights Reserved.

"""
ORM Models — PostgreSQL table definitions for Mise OS.

Tables:
  - restaurants:       tenants (soft-deleted via is_active)
  - users:             principals
  - restaurant_staff:  user ↔ restaurant assignments (deactivated, never deleted)
  - prep_boards / prep_columns:          kitchen prep board and its columns
  - pages / content_blocks:              website page and its blocks
  - navigation_menus / navigation_items: site navigation and its entries

Every container carries ``restaurant_id``; every item carries its
container id and a ``display_order`` that is unique among the active items
of that container after each committed operation. Gaps are allowed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import (
    JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr

from mise_os.storage.database import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")


def _utcnow():
    return datetime.now(timezone.utc)


# ── Tenant Directory ────────────────────────────────────────

class Restaurant(Base):
    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False)
    slug = Column(String(128), nullable=False, unique=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self):
        return f"<Restaurant {self.id} {self.slug}>"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(320), nullable=False, unique=True)
    name = Column(String(256), nullable=True)
    global_role = Column(String(32), nullable=False, default="ordinary")  # ordinary/elevated
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self):
        return f"<User {self.id} {self.email}>"


class RestaurantStaff(Base):
    __tablename__ = "restaurant_staff"
    __table_args__ = (
        Index("ix_restaurant_staff_user_active", "user_id", "is_active"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    restaurant_id = Column(
        Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False
    )
    role = Column(String(32), nullable=False, default="staff")  # owner/manager/staff
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self):
        return f"<Staff user={self.user_id} restaurant={self.restaurant_id} active={self.is_active}>"


# ── Containers & Ordered Items ──────────────────────────────

class ContainerMixin:
    """Orderable parent owned by one restaurant."""

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    @declared_attr
    def restaurant_id(cls):
        return Column(
            Integer, ForeignKey("restaurants.id", ondelete="CASCADE"),
            nullable=False, index=True,
        )

    @declared_attr
    def owner_id(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)


class OrderedItemMixin:
    """Positionable child. Subclasses define ``container_id``."""

    id = Column(Integer, primary_key=True, autoincrement=True)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def payload(self) -> Dict[str, Any]:
        raise NotImplementedError


class PrepBoard(ContainerMixin, Base):
    __tablename__ = "prep_boards"

    def __repr__(self):
        return f"<PrepBoard {self.id} restaurant={self.restaurant_id}>"


class PrepColumn(OrderedItemMixin, Base):
    __tablename__ = "prep_columns"
    __table_args__ = (
        Index("ix_prep_columns_board_order", "board_id", "display_order"),
    )

    container_id = Column(
        "board_id", Integer, ForeignKey("prep_boards.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String(128), nullable=False)
    color = Column(String(16), nullable=False, default="#1976d2")

    def payload(self) -> Dict[str, Any]:
        return {"name": self.name, "color": self.color}


class Page(ContainerMixin, Base):
    __tablename__ = "pages"

    def __repr__(self):
        return f"<Page {self.id} restaurant={self.restaurant_id}>"


class ContentBlock(OrderedItemMixin, Base):
    __tablename__ = "content_blocks"
    __table_args__ = (
        Index("ix_content_blocks_page_order", "page_id", "display_order"),
    )

    container_id = Column(
        "page_id", Integer, ForeignKey("pages.id", ondelete="CASCADE"), nullable=False
    )
    block_type = Column(String(64), nullable=False)
    title = Column(String(256), nullable=True)
    content = Column(JSONType, nullable=True)
    is_published = Column(Boolean, nullable=False, default=False)

    def payload(self) -> Dict[str, Any]:
        return {
            "block_type": self.block_type,
            "title": self.title,
            "content": self.content,
            "is_published": self.is_published,
        }


class NavigationMenu(ContainerMixin, Base):
    __tablename__ = "navigation_menus"

    def __repr__(self):
        return f"<NavigationMenu {self.id} restaurant={self.restaurant_id}>"


class NavigationItem(OrderedItemMixin, Base):
    __tablename__ = "navigation_items"
    __table_args__ = (
        Index("ix_navigation_items_menu_order", "menu_id", "display_order"),
    )

    container_id = Column(
        "menu_id", Integer, ForeignKey("navigation_menus.id", ondelete="CASCADE"),
        nullable=False,
    )
    label = Column(String(128), nullable=False)
    url = Column(Text, nullable=False)
    open_in_new_tab = Column(Boolean, nullable=False, default=False)

    def payload(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "url": self.url,
            "open_in_new_tab": self.open_in_new_tab,
        }
