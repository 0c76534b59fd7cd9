from typing import List

from pydantic import BaseModel

from schemas.task_completions import TaskCompletionRead


class DashboardStats(BaseModel):
    members: int
    resources: int
    tasks: int
    active_orders: int
    recent_completions: List[TaskCompletionRead]
