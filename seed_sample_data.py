import os
from datetime import date, datetime, timedelta, timezone

from dotenv import load_dotenv
from passlib.context import CryptContext
from sqlalchemy import create_engine, text

from fundmanager.models import Base, generate_id


def main() -> None:
    load_dotenv()
    database_url = os.getenv("DATABASE_URL", "sqlite:///./fund_manager.db")
    admin_username = os.getenv("ADMIN_USERNAME", "Ballas")
    admin_password = os.getenv("ADMIN_PASSWORD")
    if not admin_password:
        raise RuntimeError("ADMIN_PASSWORD is not set")

    engine = create_engine(database_url)
    Base.metadata.create_all(bind=engine)
    pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
    now = datetime.now(timezone.utc)

    members = [
        ("Carl Johnson", "CJ", "Runs the west side crew"),
        ("Big Smoke", "Smoke", None),
        ("Ryder", "R", "Late on the last two deliveries"),
        ("Kendl", None, None),
    ]

    resources = [
        ("Scrap Metal", "kg", "Collected from the yard"),
        ("Lockpicks", "pcs", None),
        ("Fabric", "rolls", "Used for vests"),
    ]

    tasks = [
        ("Collect scrap", 0, 0, 50, "daily"),
        ("Craft lockpicks", 1, 1, 10, "daily"),
        ("Restock fabric", 2, None, 5, "once"),
    ]

    with engine.begin() as conn:
        for table in ("orders", "crafted_items", "strikes", "task_completions",
                      "tasks", "inventory", "resources", "members", "app_users"):
            conn.execute(text(f"DELETE FROM {table}"))

        admin_id = generate_id()
        conn.execute(
            text(
                """
                INSERT INTO app_users (id, username, password_hash, display_name, role, created_at)
                VALUES (:id, :username, :password_hash, :display_name, 'admin', :created_at)
                """
            ),
            {
                "id": admin_id,
                "username": admin_username,
                "password_hash": pwd_context.hash(admin_password),
                "display_name": "Administrator",
                "created_at": now,
            },
        )

        member_ids = []
        for name, tag, notes in members:
            member_id = generate_id()
            conn.execute(
                text(
                    """
                    INSERT INTO members (id, name, tag, notes, added_by, created_at)
                    VALUES (:id, :name, :tag, :notes, :added_by, :created_at)
                    """
                ),
                {"id": member_id, "name": name, "tag": tag, "notes": notes,
                 "added_by": admin_id, "created_at": now},
            )
            member_ids.append(member_id)

        resource_ids = []
        for index, (name, unit, description) in enumerate(resources):
            resource_id = generate_id()
            conn.execute(
                text(
                    """
                    INSERT INTO resources (id, name, unit, description, created_at)
                    VALUES (:id, :name, :unit, :description, :created_at)
                    """
                ),
                {"id": resource_id, "name": name, "unit": unit,
                 "description": description, "created_at": now},
            )
            resource_ids.append(resource_id)

            # Two snapshots per resource; the later one is the current level
            for age_days, quantity in ((3, 20 * (index + 1)), (0, 35 * (index + 1))):
                conn.execute(
                    text(
                        """
                        INSERT INTO inventory (id, resource_id, quantity, updated_by, updated_at)
                        VALUES (:id, :resource_id, :quantity, :updated_by, :updated_at)
                        """
                    ),
                    {"id": generate_id(), "resource_id": resource_id, "quantity": quantity,
                     "updated_by": admin_id, "updated_at": now - timedelta(days=age_days)},
                )

        task_ids = []
        for title, resource_index, member_index, required_amount, recurrence in tasks:
            task_id = generate_id()
            conn.execute(
                text(
                    """
                    INSERT INTO tasks (id, title, resource_id, required_amount,
                                       assigned_member_id, recurrence, created_by, created_at)
                    VALUES (:id, :title, :resource_id, :required_amount,
                            :assigned_member_id, :recurrence, :created_by, :created_at)
                    """
                ),
                {
                    "id": task_id,
                    "title": title,
                    "resource_id": resource_ids[resource_index],
                    "required_amount": required_amount,
                    "assigned_member_id": member_ids[member_index] if member_index is not None else None,
                    "recurrence": recurrence,
                    "created_by": admin_id,
                    "created_at": now,
                },
            )
            task_ids.append(task_id)

        for days_ago in range(5):
            for task_index, member_index in ((0, 0), (1, 1)):
                amount = tasks[task_index][3] - days_ago * 5
                conn.execute(
                    text(
                        """
                        INSERT INTO task_completions (id, task_id, member_id, date, amount_collected,
                                                      completed, noted_by, noted_at)
                        VALUES (:id, :task_id, :member_id, :date, :amount_collected,
                                :completed, :noted_by, :noted_at)
                        """
                    ),
                    {
                        "id": generate_id(),
                        "task_id": task_ids[task_index],
                        "member_id": member_ids[member_index],
                        "date": (date.today() - timedelta(days=days_ago)).isoformat(),
                        "amount_collected": amount,
                        "completed": amount >= tasks[task_index][3],
                        "noted_by": admin_id,
                        "noted_at": now - timedelta(days=days_ago),
                    },
                )

        for member_index, reason, points in ((2, "Missed delivery", 2), (2, "No show at meeting", 2), (1, "Short on scrap", 1)):
            conn.execute(
                text(
                    """
                    INSERT INTO strikes (id, member_id, issued_by, reason, points, created_at)
                    VALUES (:id, :member_id, :issued_by, :reason, :points, :created_at)
                    """
                ),
                {"id": generate_id(), "member_id": member_ids[member_index], "issued_by": admin_id,
                 "reason": reason, "points": points, "created_at": now},
            )

        for item_name, quantity, member_index in (("Lockpick", 12, 1), ("Kevlar Vest", 3, 0)):
            conn.execute(
                text(
                    """
                    INSERT INTO crafted_items (id, item_name, quantity, crafted_by, created_at, updated_at)
                    VALUES (:id, :item_name, :quantity, :crafted_by, :created_at, :updated_at)
                    """
                ),
                {"id": generate_id(), "item_name": item_name, "quantity": quantity,
                 "crafted_by": member_ids[member_index], "created_at": now, "updated_at": now},
            )

        orders = [
            ("ORD-001", "Lockpicks", 2, "Alice", "pending", None),
            ("ORD-002", "Kevlar Vest", 1, "Sweet", "in_progress", 0),
            ("ORD-003", "Scrap Metal", 40, "Cesar", "completed", 3),
        ]
        for reference_id, items, quantity, customer_name, status, member_index in orders:
            conn.execute(
                text(
                    """
                    INSERT INTO orders (id, reference_id, items, quantity, customer_name,
                                        status, assigned_member_id, created_at, updated_at)
                    VALUES (:id, :reference_id, :items, :quantity, :customer_name,
                            :status, :assigned_member_id, :created_at, :updated_at)
                    """
                ),
                {
                    "id": generate_id(),
                    "reference_id": reference_id,
                    "items": items,
                    "quantity": quantity,
                    "customer_name": customer_name,
                    "status": status,
                    "assigned_member_id": member_ids[member_index] if member_index is not None else None,
                    "created_at": now,
                    "updated_at": now,
                },
            )

    print("Sample data inserted successfully.")


if __name__ == "__main__":
    main()
