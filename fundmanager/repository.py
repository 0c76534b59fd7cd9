"""
CRUD access to the fund manager tables.

One `CrudRepository` per entity wraps the session calls the routes need.
Every write commits immediately; a database failure rolls the session back
and surfaces as `StorageError` with the driver message kept in the logs.
"""
from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterator, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fundmanager.errors import NotFoundError, StorageError
from fundmanager.logger import get_logger
from fundmanager.models import (
    AppUser,
    CraftedItem,
    Inventory,
    Member,
    Order,
    Resource,
    Strike,
    Task,
    TaskCompletion,
    utcnow,
)

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")


@contextmanager
def storage_guard(db: Session, action: str) -> Iterator[None]:
    """Roll back and raise StorageError when a statement fails."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Storage failure during {action}: {e}")
        raise StorageError() from e


class CrudRepository(Generic[ModelT]):
    """
    List/create/update/delete for one mapped table.

    Args:
        model: Mapped class
        label: Human name used in not-found messages ("Member not found")
        order_by: Default ordering for list()
        touch_column: Timestamp column refreshed on every update
    """

    def __init__(
        self,
        model: Type[ModelT],
        label: str,
        order_by: Sequence[Any] = (),
        touch_column: Optional[str] = None,
    ):
        self.model = model
        self.label = label
        self.order_by = tuple(order_by)
        self.touch_column = touch_column

    def list(
        self,
        db: Session,
        limit: Optional[int] = None,
        **filters: Any,
    ) -> List[ModelT]:
        """Return rows in default order; `None` filter values are ignored."""
        stmt = select(self.model)
        for column, value in filters.items():
            if value is not None:
                stmt = stmt.where(getattr(self.model, column) == value)
        if self.order_by:
            stmt = stmt.order_by(*self.order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        with storage_guard(db, f"list {self.label}"):
            return list(db.scalars(stmt).all())

    def get(self, db: Session, row_id: str) -> Optional[ModelT]:
        with storage_guard(db, f"get {self.label}"):
            return db.get(self.model, row_id)

    def create(self, db: Session, values: Dict[str, Any]) -> ModelT:
        row = self.model(**values)
        with storage_guard(db, f"create {self.label}"):
            db.add(row)
            db.commit()
            db.refresh(row)
        logger.info(f"Created {self.label} {row.id}")
        return row

    def update(self, db: Session, row_id: str, values: Dict[str, Any]) -> ModelT:
        """
        Apply a partial update.

        Only keys present in `values` are written; a key mapped to None clears
        the column. Raises NotFoundError when the row does not exist.
        """
        row = self.get(db, row_id)
        if row is None:
            raise NotFoundError(f"{self.label} not found")

        for column, value in values.items():
            setattr(row, column, value)
        if self.touch_column:
            setattr(row, self.touch_column, utcnow())

        with storage_guard(db, f"update {self.label}"):
            db.commit()
            db.refresh(row)
        logger.info(f"Updated {self.label} {row_id}: {sorted(values)}")
        return row

    def delete(self, db: Session, row_id: str) -> bool:
        """Delete a row if present. Returns whether anything was removed."""
        row = self.get(db, row_id)
        if row is None:
            logger.debug(f"Delete of missing {self.label} {row_id} ignored")
            return False
        with storage_guard(db, f"delete {self.label}"):
            db.delete(row)
            db.commit()
        logger.info(f"Deleted {self.label} {row_id}")
        return True


members = CrudRepository(Member, "Member", order_by=(Member.created_at.desc(),))
resources = CrudRepository(Resource, "Resource", order_by=(Resource.created_at.asc(),))
inventory = CrudRepository(
    Inventory,
    "Inventory",
    order_by=(Inventory.updated_at.desc(), Inventory.id.desc()),
    touch_column="updated_at",
)
tasks = CrudRepository(Task, "Task", order_by=(Task.created_at.asc(),))
task_completions = CrudRepository(
    TaskCompletion,
    "Completion",
    order_by=(TaskCompletion.noted_at.desc(),),
    touch_column="noted_at",
)
strikes = CrudRepository(Strike, "Strike", order_by=(Strike.created_at.desc(),))
crafted_items = CrudRepository(
    CraftedItem,
    "Item",
    order_by=(CraftedItem.created_at.desc(),),
    touch_column="updated_at",
)
orders = CrudRepository(
    Order,
    "Order",
    order_by=(Order.created_at.desc(),),
    touch_column="updated_at",
)
users = CrudRepository(AppUser, "User", order_by=(AppUser.created_at.asc(),))


def latest_inventory_for(db: Session, resource_id: str) -> Optional[Inventory]:
    """Most recently updated inventory row for a resource, if any."""
    stmt = (
        select(Inventory)
        .where(Inventory.resource_id == resource_id)
        .order_by(Inventory.updated_at.desc(), Inventory.id.desc())
        .limit(1)
    )
    with storage_guard(db, "latest inventory"):
        return db.scalars(stmt).first()


def set_inventory_level(
    db: Session,
    resource_id: str,
    quantity: int,
    updated_by: Optional[str] = None,
) -> Inventory:
    """
    Set the stock level of a resource.

    Updates the resource's current row in place, or inserts the first row when
    the resource has none yet. Not atomic across the read and the write.
    """
    current = latest_inventory_for(db, resource_id)
    values = {"quantity": quantity}
    if updated_by:
        values["updated_by"] = updated_by
    if current is None:
        return inventory.create(db, {"resource_id": resource_id, **values})
    return inventory.update(db, current.id, values)


def find_user(db: Session, username: str) -> Optional[AppUser]:
    with storage_guard(db, "find user"):
        return db.scalars(select(AppUser).where(AppUser.username == username)).first()
