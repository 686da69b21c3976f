"""
inventory_access.db.models

Persistence schema for profiles and ownable inventory records.

Responsibilities:
- Define ORM models:
  - UserProfile: role profile of an authenticated subject
  - Ownable inventory tables sharing a nullable `created_by` owner column
  - OrphanClaim: append-only log of adopted orphan records
- Map each ownable table to its `RecordType`.
"""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import Enum, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from inventory_access.auth.roles import Role
from inventory_access.db.base import Base, TimestampMixin, new_id, utcnow


class RecordType(enum.StrEnum):
    # Values are table names; they appear in URLs and in the claims log.
    equipment = "equipment"
    inventory_movements = "inventory_movements"
    maintenance_records = "maintenance_records"
    orders = "orders"
    order_batches = "order_batches"
    suppliers = "suppliers"
    readers = "readers"


class UserProfile(TimestampMixin, Base):
    __tablename__ = "profiles"

    # Subject id issued by the identity provider.
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    full_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[Role] = mapped_column(Enum(Role), nullable=False, default=Role.intruso)


class OwnableMixin(TimestampMixin):
    """
    Columns shared by every record that can be orphaned and adopted.
    `created_by` is NULL for orphaned records.
    """

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(256), nullable=False, default="")

    created_by: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)


class Equipment(OwnableMixin, Base):
    __tablename__ = RecordType.equipment.value


class InventoryMovement(OwnableMixin, Base):
    __tablename__ = RecordType.inventory_movements.value


class MaintenanceRecord(OwnableMixin, Base):
    __tablename__ = RecordType.maintenance_records.value


class Order(OwnableMixin, Base):
    __tablename__ = RecordType.orders.value


class OrderBatch(OwnableMixin, Base):
    __tablename__ = RecordType.order_batches.value


class Supplier(OwnableMixin, Base):
    __tablename__ = RecordType.suppliers.value


class Reader(OwnableMixin, Base):
    __tablename__ = RecordType.readers.value


OWNABLE_MODELS: dict[RecordType, type[OwnableMixin]] = {
    RecordType.equipment: Equipment,
    RecordType.inventory_movements: InventoryMovement,
    RecordType.maintenance_records: MaintenanceRecord,
    RecordType.orders: Order,
    RecordType.order_batches: OrderBatch,
    RecordType.suppliers: Supplier,
    RecordType.readers: Reader,
}


class OrphanClaim(Base):
    __tablename__ = "orphaned_records_claims"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    table_name: Mapped[str] = mapped_column(String(64), nullable=False)
    record_id: Mapped[str] = mapped_column(String(64), nullable=False)
    claimed_by: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    status: Mapped[str | None] = mapped_column(String(32), nullable=True, default="approved")
    claimed_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)

    __table_args__ = (Index("ix_claims_table_record", "table_name", "record_id"),)


# --- Module Notes -----------------------------------------------------------
# Inventory tables carry many more columns in the full application; only what
# ownership needs is modeled here.
