"""
SQLAlchemy models for the fund manager.

Cross-table references (member, resource and task ids) are plain indexed
string columns without foreign-key constraints: deleting a row never
cascades and stale references are tolerated by every reader.
"""
import uuid
from datetime import datetime, date, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    Index,
    TypeDecorator,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()

RECURRENCES = ("daily", "once", "custom")
ORDER_STATUSES = ("pending", "in_progress", "completed")
USER_ROLES = ("admin", "member")


def generate_id() -> str:
    """Short opaque identifier used as primary key for every table."""
    return uuid.uuid4().hex[:9]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def today_iso() -> str:
    return date.today().isoformat()


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamp on every backend.

    SQLite keeps no offset, so values are normalized to UTC on the way in and
    naive values read back are marked as UTC.
    """
    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Member(Base):
    """
    Model for roster members.
    """
    __tablename__ = "members"

    id = Column(String(16), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    tag = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    added_by = Column(String(16), nullable=True)
    created_at = Column(UTCDateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Member(id={self.id}, name={self.name})>"


class Resource(Base):
    """
    Model for trackable commodity types.
    """
    __tablename__ = "resources"

    id = Column(String(16), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    unit = Column(String(50), nullable=False, default="pcs")
    created_at = Column(UTCDateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Resource(id={self.id}, name={self.name})>"


class Inventory(Base):
    """
    Model for quantity-on-hand snapshots.
    Several rows may exist per resource; the current level is the newest one.
    """
    __tablename__ = "inventory"

    id = Column(String(16), primary_key=True, default=generate_id)
    resource_id = Column(String(16), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    updated_by = Column(String(16), nullable=True)
    updated_at = Column(UTCDateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index('ix_inventory_resource_updated', 'resource_id', 'updated_at'),
    )

    def __repr__(self) -> str:
        return f"<Inventory(id={self.id}, resource_id={self.resource_id}, quantity={self.quantity})>"


class Task(Base):
    """
    Model for recurring or one-off work items.
    """
    __tablename__ = "tasks"

    id = Column(String(16), primary_key=True, default=generate_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    resource_id = Column(String(16), nullable=True)
    required_amount = Column(Integer, nullable=False, default=0)
    assigned_member_id = Column(String(16), nullable=True)
    recurrence = Column(String(16), nullable=False, default="daily")
    created_by = Column(String(16), nullable=True)
    created_at = Column(UTCDateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index('ix_tasks_member', 'assigned_member_id'),
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title={self.title})>"


class TaskCompletion(Base):
    """
    Model for dated work logged against a task.
    Append-only: the same task, member and date may appear several times.
    """
    __tablename__ = "task_completions"

    id = Column(String(16), primary_key=True, default=generate_id)
    task_id = Column(String(16), nullable=False)
    member_id = Column(String(16), nullable=True)
    date = Column(String(10), nullable=False, default=today_iso)
    amount_collected = Column(Integer, nullable=False, default=0)
    completed = Column(Boolean, nullable=False, default=False)
    noted_by = Column(String(16), nullable=True)
    noted_at = Column(UTCDateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index('ix_task_completions_task', 'task_id'),
        Index('ix_task_completions_member', 'member_id'),
        Index('ix_task_completions_noted', 'noted_at'),
    )

    def __repr__(self) -> str:
        return f"<TaskCompletion(id={self.id}, task_id={self.task_id}, date={self.date})>"


class Strike(Base):
    """
    Model for disciplinary points issued to a member.
    """
    __tablename__ = "strikes"

    id = Column(String(16), primary_key=True, default=generate_id)
    member_id = Column(String(16), nullable=False, index=True)
    issued_by = Column(String(16), nullable=True)
    reason = Column(Text, nullable=True)
    points = Column(Integer, nullable=False, default=1)
    created_at = Column(UTCDateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Strike(id={self.id}, member_id={self.member_id}, points={self.points})>"


class CraftedItem(Base):
    """
    Model for the crafting log.
    """
    __tablename__ = "crafted_items"

    id = Column(String(16), primary_key=True, default=generate_id)
    item_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    crafted_by = Column(String(16), nullable=True)
    created_at = Column(UTCDateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<CraftedItem(id={self.id}, item_name={self.item_name}, quantity={self.quantity})>"


class Order(Base):
    """
    Model for customer orders moving through pending -> in_progress -> completed.
    """
    __tablename__ = "orders"

    id = Column(String(16), primary_key=True, default=generate_id)
    reference_id = Column(String(255), nullable=False)
    items = Column(Text, nullable=False)
    quantity = Column(Integer, nullable=False)
    customer_name = Column(String(255), nullable=False)
    customer_contact = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default="pending")
    assigned_member_id = Column(String(16), nullable=True)
    created_at = Column(UTCDateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index('ix_orders_status', 'status'),
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, reference_id={self.reference_id}, status={self.status})>"


class AppUser(Base):
    """
    Model for accounts that can sign in.
    """
    __tablename__ = "app_users"

    id = Column(String(16), primary_key=True, default=generate_id)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    display_name = Column(String(255), nullable=True)
    role = Column(String(16), nullable=False, default="member")
    created_at = Column(UTCDateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<AppUser(id={self.id}, username={self.username}, role={self.role})>"
