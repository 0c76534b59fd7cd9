"""
Read-time folds over full row lists.

Nothing here is persisted: every figure is recomputed from the rows on each
request, so it can never drift from the underlying tables.
"""
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from fundmanager.models import Inventory, Member, Order, Strike, TaskCompletion

# Members above this many points are flagged on the strikes page
STRIKE_RISK_THRESHOLD = 3


def summarize_strikes(
    members: Sequence[Member],
    strikes: Iterable[Strike],
    risk_threshold: int = STRIKE_RISK_THRESHOLD,
) -> List[Dict[str, Any]]:
    """
    Per-member strike count and point total.

    Members without strikes report zero for both. Strikes pointing at a
    member that no longer exists are ignored. The result is sorted by
    total points, highest first.
    """
    counts: Dict[str, int] = defaultdict(int)
    points: Dict[str, int] = defaultdict(int)
    for strike in strikes:
        counts[strike.member_id] += 1
        points[strike.member_id] += strike.points or 0

    summary = []
    for member in members:
        total = points.get(member.id, 0)
        summary.append({
            "id": member.id,
            "name": member.name,
            "tag": member.tag,
            "notes": member.notes,
            "added_by": member.added_by,
            "created_at": member.created_at,
            "strike_count": counts.get(member.id, 0),
            "total_strike_points": total,
            "at_risk": total > risk_threshold,
        })

    summary.sort(key=lambda row: row["total_strike_points"], reverse=True)
    return summary


def _inventory_sort_key(row: Inventory) -> Tuple[Any, str]:
    return (row.updated_at, row.id)


def resolve_current_inventory(rows: Iterable[Inventory]) -> List[Inventory]:
    """
    Pick the current row for every resource: the one updated last.

    Rows with identical timestamps are ordered by id so the pick is stable.
    """
    current: Dict[str, Inventory] = {}
    for row in rows:
        best = current.get(row.resource_id)
        if best is None or _inventory_sort_key(row) > _inventory_sort_key(best):
            current[row.resource_id] = row
    return sorted(current.values(), key=_inventory_sort_key, reverse=True)


def current_quantity(rows: Iterable[Inventory], resource_id: str) -> Optional[int]:
    """Current quantity on hand for one resource, or None if never recorded."""
    for row in resolve_current_inventory(r for r in rows if r.resource_id == resource_id):
        return row.quantity
    return None


def completion_history(
    members: Sequence[Member],
    completions: Iterable[TaskCompletion],
) -> List[Dict[str, Any]]:
    """
    Group completions by member.

    Only members with at least one completion are returned, most active first.
    Each entry carries the member's completions newest first, how many of them
    are marked completed and the total amount collected.
    """
    by_member: Dict[str, List[TaskCompletion]] = defaultdict(list)
    for completion in completions:
        if completion.member_id:
            by_member[completion.member_id].append(completion)

    history = []
    for member in members:
        rows = by_member.get(member.id)
        if not rows:
            continue
        rows = sorted(rows, key=lambda c: c.noted_at, reverse=True)
        history.append({
            "member": member,
            "completions": rows,
            "completed_count": sum(1 for c in rows if c.completed),
            "total_collected": sum(c.amount_collected or 0 for c in rows),
        })

    history.sort(key=lambda entry: len(entry["completions"]), reverse=True)
    return history


def daily_completion_summary(completions: Iterable[TaskCompletion]) -> List[Dict[str, Any]]:
    """
    Collapse repeated logs of the same task by the same member on the same day.

    Newest date first; entries within a day keep task/member order.
    """
    groups: Dict[Tuple[str, Optional[str], str], Dict[str, Any]] = {}
    for completion in completions:
        key = (completion.task_id, completion.member_id, completion.date)
        group = groups.get(key)
        if group is None:
            group = groups[key] = {
                "task_id": completion.task_id,
                "member_id": completion.member_id,
                "date": completion.date,
                "entries": 0,
                "completed_count": 0,
                "total_collected": 0,
            }
        group["entries"] += 1
        group["completed_count"] += 1 if completion.completed else 0
        group["total_collected"] += completion.amount_collected or 0

    rows = sorted(groups.values(), key=lambda g: (g["task_id"], g["member_id"] or ""))
    rows.sort(key=lambda g: g["date"], reverse=True)
    return rows


def split_orders(orders: Iterable[Order]) -> Tuple[List[Order], List[Order]]:
    """Split orders into (active, history); history holds completed orders."""
    active: List[Order] = []
    history: List[Order] = []
    for order in orders:
        (history if order.status == "completed" else active).append(order)
    return active, history
