"""
Command-line front end: one sub-command group per page of the app.

    python -m fundmanager members list
    python -m fundmanager --username Ballas --password ... orders add \\
        --reference-id ORD-001 --items Lockpicks --quantity 2 --customer-name Alice

Without credentials the session is a read-only guest and write actions are
refused before anything is sent.
"""
import argparse
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, TextIO

from fundmanager.client import ApiError, FundManagerClient
from fundmanager.config import settings
from fundmanager.logger import get_logger

logger = get_logger(__name__)


def _bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "y", "on"):
        return True
    if lowered in ("0", "false", "no", "n", "off"):
        return False
    raise argparse.ArgumentTypeError(f"expected yes/no, got '{value}'")


# Each field: (name, type, required on add, help)
PAGES: Dict[str, Dict[str, Any]] = {
    "members": {
        "collection": "members",
        "columns": ["id", "name", "tag", "notes", "created_at"],
        "fields": [
            ("name", str, True, "Member name"),
            ("tag", str, False, "In-game tag"),
            ("notes", str, False, "Free-form notes"),
        ],
    },
    "resources": {
        "collection": "resources",
        "columns": ["id", "name", "unit", "description"],
        "fields": [
            ("name", str, True, "Resource name"),
            ("unit", str, False, "Unit of measure (default pcs)"),
            ("description", str, False, "Description"),
        ],
    },
    "tasks": {
        "collection": "tasks",
        "columns": ["id", "title", "recurrence", "required_amount", "resource_id", "assigned_member_id"],
        "fields": [
            ("title", str, True, "Task title"),
            ("description", str, False, "Description"),
            ("resource_id", str, False, "Resource collected by the task"),
            ("required_amount", int, False, "Amount required per occurrence"),
            ("assigned_member_id", str, False, "Assignee member id"),
            ("recurrence", str, False, "daily, once or custom"),
        ],
    },
    "completions": {
        "collection": "task_completions",
        "columns": ["id", "date", "task_id", "member_id", "amount_collected", "completed"],
        "add_action": "log",
        "extras": [("history", "Completions grouped per member"), ("daily", "Totals per task, member and day")],
        "fields": [
            ("task_id", str, True, "Task id"),
            ("member_id", str, False, "Member who did the work"),
            ("date", str, False, "YYYY-MM-DD, defaults to today"),
            ("amount_collected", int, False, "Amount collected"),
            ("completed", _bool, False, "yes/no"),
        ],
    },
    "strikes": {
        "collection": "strikes",
        "extras": [("summary", "Strike count and points per member")],
        "columns": ["id", "member_id", "points", "reason", "created_at"],
        "fields": [
            ("member_id", str, True, "Member receiving the strike"),
            ("reason", str, False, "Reason"),
            ("points", int, False, "Points (default 1)"),
        ],
    },
    "crafting": {
        "collection": "crafted_items",
        "columns": ["id", "item_name", "quantity", "crafted_by", "created_at"],
        "fields": [
            ("item_name", str, True, "Item name"),
            ("quantity", int, True, "Quantity crafted"),
            ("crafted_by", str, False, "Member id of the crafter"),
        ],
    },
    "orders": {
        "collection": "orders",
        "extras": [("board", "Active orders and history")],
        "columns": ["id", "reference_id", "status", "items", "quantity", "customer_name", "assigned_member_id"],
        "fields": [
            ("reference_id", str, True, "Order reference"),
            ("items", str, True, "Items ordered"),
            ("quantity", int, True, "Quantity"),
            ("customer_name", str, True, "Customer name"),
            ("customer_contact", str, False, "Customer contact"),
            ("notes", str, False, "Notes"),
            ("status", str, False, "pending, in_progress or completed"),
            ("assigned_member_id", str, False, "Member handling the order"),
        ],
    },
}


def _format_cell(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, str) and len(value) >= 19 and value[10:11] == "T":
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d %H:%M")
        except ValueError:
            return value
    return str(value)


def render_table(rows: Sequence[Dict[str, Any]], columns: Sequence[str]) -> str:
    """Plain aligned table; an empty list renders as a short notice."""
    if not rows:
        return "(no rows)"
    cells = [[_format_cell(row.get(col)) for col in columns] for row in rows]
    widths = [max(len(col), *(len(line[i]) for line in cells)) for i, col in enumerate(columns)]
    header = "  ".join(col.upper().ljust(widths[i]) for i, col in enumerate(columns))
    rule = "  ".join("-" * w for w in widths)
    body = ["  ".join(line[i].ljust(widths[i]) for i in range(len(columns))) for line in cells]
    return "\n".join([header, rule, *body])


def _option(field: str) -> str:
    return "--" + field.replace("_", "-")


def _add_entity_page(subparsers: argparse._SubParsersAction, page: str, page_def: Dict[str, Any]) -> None:
    parser = subparsers.add_parser(page, help=f"{page} page")
    actions = parser.add_subparsers(dest="action", required=True)

    actions.add_parser("list", help=f"List {page}")

    add = actions.add_parser(page_def.get("add_action", "add"), help=f"Create a {page} entry")
    for field, kind, required, help_text in page_def["fields"]:
        add.add_argument(_option(field), dest=field, type=kind, required=required, help=help_text)

    edit = actions.add_parser("edit", help="Change some fields of an entry")
    edit.add_argument("id")
    for field, kind, _, help_text in page_def["fields"]:
        edit.add_argument(_option(field), dest=field, type=kind, help=help_text)
    edit.add_argument(
        "--clear",
        action="append",
        default=[],
        metavar="FIELD",
        help="Set an optional field to empty (repeatable)",
    )

    remove = actions.add_parser("remove", help="Delete an entry")
    remove.add_argument("id")

    for name, help_text in page_def.get("extras", ()):
        actions.add_parser(name, help=help_text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fundmanager", description="Ballas Fund Manager")
    parser.add_argument("--base-url", default=settings.api_base_url, help="API root URL")
    parser.add_argument("--username", default=settings.cli_username or None, help="Admin username")
    parser.add_argument("--password", default=settings.cli_password or None, help="Admin password")

    pages = parser.add_subparsers(dest="page", required=True)

    dashboard = pages.add_parser("dashboard", help="Headline counts")
    dashboard.set_defaults(action="show")

    for page, page_def in PAGES.items():
        _add_entity_page(pages, page, page_def)

    inventory = pages.add_parser("inventory", help="Stock levels")
    inventory_actions = inventory.add_subparsers(dest="action", required=True)
    current = inventory_actions.add_parser("list", help="Current level per resource")
    current.add_argument("--all", action="store_true", help="Show every recorded snapshot")
    set_level = inventory_actions.add_parser("set", help="Set the stock level of a resource")
    set_level.add_argument("resource_id")
    set_level.add_argument("quantity", type=int)

    return parser


def _fields_from(args: argparse.Namespace, page_def: Dict[str, Any]) -> Dict[str, Any]:
    values = {}
    for field, _, _, _ in page_def["fields"]:
        value = getattr(args, field, None)
        if value is not None:
            values[field] = value
    return values


def _run_entity_page(client: FundManagerClient, args: argparse.Namespace, out: TextIO) -> None:
    page_def = PAGES[args.page]
    collection = getattr(client, page_def["collection"])

    if args.action == "list":
        print(render_table(collection.list(), page_def["columns"]), file=out)
    elif args.action == page_def.get("add_action", "add"):
        row = collection.create(**_fields_from(args, page_def))
        print(f"Created {row['id']}", file=out)
        print(render_table([row], page_def["columns"]), file=out)
    elif args.action == "edit":
        changes = _fields_from(args, page_def)
        known = {field for field, _, _, _ in page_def["fields"]}
        for field in args.clear:
            field = field.replace("-", "_")
            if field not in known:
                raise ApiError(400, f"Unknown field '{field}'")
            changes[field] = None
        row = collection.update(args.id, **changes)
        print(f"Updated {row['id']}", file=out)
        print(render_table([row], page_def["columns"]), file=out)
    elif args.action == "remove":
        collection.delete(args.id)
        print(f"Removed {args.id}", file=out)
    elif args.action == "history":
        for entry in client.completion_history():
            member = entry["member"]
            print(
                f"{member['name']}: {entry['completed_count']} completed, "
                f"{entry['total_collected']} collected",
                file=out,
            )
            print(render_table(entry["completions"], page_def["columns"]), file=out)
            print(file=out)
    elif args.action == "daily":
        rows = client.daily_completions()
        print(render_table(rows, ["date", "task_id", "member_id", "entries", "completed_count", "total_collected"]), file=out)
    elif args.action == "summary":
        rows = client.strike_summary()
        print(render_table(rows, ["id", "name", "strike_count", "total_strike_points", "at_risk"]), file=out)
    elif args.action == "board":
        board = client.order_board()
        print("Active orders", file=out)
        print(render_table(board["active"], page_def["columns"]), file=out)
        print(file=out)
        print("History", file=out)
        print(render_table(board["history"], page_def["columns"]), file=out)


def _run_inventory(client: FundManagerClient, args: argparse.Namespace, out: TextIO) -> None:
    columns = ["resource_id", "quantity", "updated_at", "id"]
    if args.action == "list":
        rows = client.inventory.list() if args.all else client.current_inventory()
        names = {r["id"]: r["name"] for r in client.resources.list()}
        rows = [{**row, "resource": names.get(row["resource_id"], "(deleted)")} for row in rows]
        print(render_table(rows, ["resource"] + columns), file=out)
    elif args.action == "set":
        row = client.set_inventory_level(args.resource_id, args.quantity)
        print(f"Stock of {row['resource_id']} set to {row['quantity']}", file=out)


def _run_dashboard(client: FundManagerClient, out: TextIO) -> None:
    stats = client.dashboard()
    for label in ("members", "resources", "tasks", "active_orders"):
        print(f"{label.replace('_', ' ').title():15} {stats[label]}", file=out)
    print(file=out)
    print("Recent completions", file=out)
    print(render_table(stats["recent_completions"], PAGES["completions"]["columns"]), file=out)


def main(
    argv: Optional[List[str]] = None,
    client: Optional[FundManagerClient] = None,
    out: TextIO = sys.stdout,
    err: TextIO = sys.stderr,
) -> int:
    args = build_parser().parse_args(argv)
    client = client or FundManagerClient(base_url=args.base_url)

    try:
        if args.username and args.password:
            client.login(args.username, args.password)
        else:
            client.login_as_guest()

        if args.page == "dashboard":
            _run_dashboard(client, out)
        elif args.page == "inventory":
            _run_inventory(client, args, out)
        else:
            _run_entity_page(client, args, out)
    except ApiError as e:
        logger.debug(f"{args.page} {args.action} failed: {e.status_code} {e.message}")
        print(f"Error: {e.message}", file=err)
        return 1
    finally:
        client.close()

    return 0
