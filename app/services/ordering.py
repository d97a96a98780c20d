"""Integer positions of sibling rows inside one parent.

A scope names the model, the column pointing at the parent, the parent id and
the column holding the position. Soft-deleted rows never take part. Nothing
here commits: callers wrap these calls in ``app.core.database.transaction`` so
a multi-row shift lands atomically with the row being moved.
"""
import logging
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.exceptions import BusinessRuleError, DuplicateOrderError, NotFoundError
from app.models.lesson import Lesson
from app.models.unit import Unit

logger = logging.getLogger(__name__)

PARKED = 0


class OrderScope(NamedTuple):
    model: Any
    parent_column: Any
    parent_id: int
    order_column: Any
    label: str

    def query(self, db: Session):
        return db.query(self.model).filter(
            self.parent_column == self.parent_id,
            self.model.deleted_at == None,
        )

    @property
    def order_attr(self) -> str:
        return self.order_column.key


def unit_scope(course_id: int) -> OrderScope:
    return OrderScope(Unit, Unit.course_id, course_id, Unit.unit_order, "Unit")


def lesson_scope(unit_id: int) -> OrderScope:
    return OrderScope(Lesson, Lesson.unit_id, unit_id, Lesson.lesson_order, "Lesson")


class OrderingService:
    def next_order(self, db: Session, scope: OrderScope) -> int:
        current_max = (
            db.query(func.max(scope.order_column))
            .filter(scope.parent_column == scope.parent_id, scope.model.deleted_at == None)
            .scalar()
        )
        return (current_max or 0) + 1

    def validate_order(self, db: Session, scope: OrderScope, candidate: int, exclude_id: Optional[int] = None) -> None:
        query = scope.query(db).filter(scope.order_column == candidate)
        if exclude_id is not None:
            query = query.filter(scope.model.id != exclude_id)
        if query.first():
            raise DuplicateOrderError(f"{scope.label} order {candidate} already exists.")

    def shift_orders(
        self, db: Session, scope: OrderScope, old_order: int, new_order: int, exclude_id: Optional[int] = None
    ) -> int:
        """Close the gap at ``old_order`` and open one at ``new_order``.

        Moving down pulls the rows in ``(old, new]`` up by one; moving up pushes
        the rows in ``[new, old)`` down by one. Returns the number of rows shifted.
        """
        if old_order == new_order:
            return 0

        query = scope.query(db)
        if exclude_id is not None:
            query = query.filter(scope.model.id != exclude_id)

        column = scope.order_column
        if old_order < new_order:
            rows = query.filter(column > old_order, column <= new_order).all()
            step = -1
        else:
            rows = query.filter(column >= new_order, column < old_order).all()
            step = 1
        self._assign(db, scope, [(row, getattr(row, scope.order_attr) + step) for row in rows])
        return len(rows)

    def reorder(self, db: Session, scope: OrderScope, orders: Dict[int, int]) -> List[Any]:
        """Assign the requested positions; siblings left out keep their relative order.

        Requested positions must be distinct and inside ``1..N`` for the N
        siblings of the scope, so the result stays unique and dense.
        """
        targets = list(orders.values())
        if len(targets) != len(set(targets)):
            logger.warning(
                f"Rejected {scope.label.lower()} reorder with duplicate orders",
                extra={"parent_id": scope.parent_id},
            )
            raise DuplicateOrderError("Duplicate orders found.")

        siblings = self._ordered(db, scope)
        by_id = {row.id: row for row in siblings}
        unknown = [entity_id for entity_id in orders if entity_id not in by_id]
        if unknown:
            raise NotFoundError(scope.label, unknown[0])

        total = len(siblings)
        out_of_range = [order for order in targets if order < 1 or order > total]
        if out_of_range:
            raise BusinessRuleError(
                f"{scope.label} order {out_of_range[0]} is out of range.",
                hint=f"Orders must be between 1 and {total}.",
            )

        free_positions = iter(sorted(set(range(1, total + 1)) - set(targets)))
        self._assign(db, scope, [
            (row, orders[row.id] if row.id in orders else next(free_positions))
            for row in siblings
        ])
        return sorted(siblings, key=lambda row: getattr(row, scope.order_attr))

    def move_to_position(self, db: Session, scope: OrderScope, entity: Any, new_order: int) -> Any:
        self.compact(db, scope)
        last_position = scope.query(db).count()
        new_order = max(1, min(new_order, last_position))
        old_order = getattr(entity, scope.order_attr)
        if old_order == new_order:
            return entity

        # park the row outside 1..N while its siblings shift
        setattr(entity, scope.order_attr, PARKED)
        db.flush()
        self.shift_orders(db, scope, old_order, new_order, exclude_id=entity.id)
        setattr(entity, scope.order_attr, new_order)
        db.add(entity)
        db.flush()
        logger.info(
            f"{scope.label} {entity.id} moved from position {old_order} to {new_order}",
            extra={"parent_id": scope.parent_id, "old_order": old_order, "new_order": new_order},
        )
        return entity

    def compact(self, db: Session, scope: OrderScope) -> None:
        """Renumber the scope densely from 1 keeping the current sequence."""
        rows = self._ordered(db, scope)
        self._assign(db, scope, [(row, position) for position, row in enumerate(rows, start=1)])

    def _ordered(self, db: Session, scope: OrderScope) -> List[Any]:
        return scope.query(db).order_by(scope.order_column, scope.model.id).all()

    def _assign(self, db: Session, scope: OrderScope, placements: List[Tuple[Any, int]]) -> None:
        """Write new positions without two live rows ever sharing one.

        Changed rows first take the negated target, then flip to it, so the
        per-parent unique index holds after every single UPDATE.
        """
        changed = [(row, position) for row, position in placements if getattr(row, scope.order_attr) != position]
        if not changed:
            return
        for row, position in changed:
            setattr(row, scope.order_attr, -position)
        db.flush()
        for row, position in changed:
            setattr(row, scope.order_attr, position)
        db.flush()

ordering_service = OrderingService()
