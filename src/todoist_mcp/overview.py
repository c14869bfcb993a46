"""
Daily overview.

Fetches the full task list once, sorts every dated task into one of four
buckets relative to "today", and renders a sectioned summary. Tasks with
no (parseable) due date, or due more than a week out, are left out of
every bucket.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Iterable

from pydantic import BaseModel, Field

from todoist_mcp.models import Task
from todoist_mcp.tools.formatting import format_overview_line, format_task_json, parse_tasks

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
UPCOMING_DAYS = 7

SECTION_TITLES = {
    "overdue": "🔴 Overdue",
    "today": "📌 Due Today",
    "upcoming": "📆 Upcoming (next 7 days)",
    "completed_today": "✅ Completed Today",
}


class DailyOverview(BaseModel):
    """Tasks bucketed for one day. Counts are taken before truncation."""

    as_of: date
    overdue: list[Task] = Field(default_factory=list)
    today: list[Task] = Field(default_factory=list)
    upcoming: list[Task] = Field(default_factory=list)
    completed_today: list[Task] = Field(default_factory=list)
    counts: dict[str, int] = Field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def bucket(self, name: str) -> list[Task]:
        return getattr(self, name)


def _by_priority(tasks: list[Task]) -> list[Task]:
    # sorted() is stable, so equal priorities keep discovery order.
    return sorted(tasks, key=lambda t: t.effective_priority)


def build_daily_overview(
    tasks: Iterable[Task],
    as_of: date | None = None,
    limit: int = DEFAULT_LIMIT,
) -> DailyOverview:
    """
    Classify tasks into overdue / today / upcoming / completed-today.

    Args:
        tasks: Tasks to classify
        as_of: The day treated as "today" (defaults to the current date)
        limit: Maximum tasks kept per bucket, after sorting by priority

    Returns:
        DailyOverview with truncated buckets and true per-bucket counts.
    """
    today = as_of or date.today()
    horizon = today + timedelta(days=UPCOMING_DAYS)

    buckets: dict[str, list[Task]] = {name: [] for name in SECTION_TITLES}

    for task in tasks:
        due = task.due_date
        if due is None:
            continue

        if task.is_completed:
            if due == today:
                buckets["completed_today"].append(task)
        elif due < today:
            buckets["overdue"].append(task)
        elif due == today:
            buckets["today"].append(task)
        elif due <= horizon:
            buckets["upcoming"].append(task)

    for name in ("overdue", "today", "upcoming"):
        buckets[name] = _by_priority(buckets[name])

    counts = {name: len(items) for name, items in buckets.items()}

    return DailyOverview(
        as_of=today,
        counts=counts,
        **{name: items[:limit] for name, items in buckets.items()},
    )


async def get_daily_overview(
    client: Any,
    as_of: date | None = None,
    limit: int = DEFAULT_LIMIT,
) -> DailyOverview:
    """Fetch all tasks with a single call and build the overview."""
    response = await client.get_tasks()
    tasks = parse_tasks(response)
    overview = build_daily_overview(tasks, as_of=as_of, limit=limit)
    logger.info(
        "Daily overview for %s: %s",
        overview.as_of.isoformat(),
        overview.counts,
    )
    return overview


def format_daily_overview(overview: DailyOverview) -> str:
    """Render the overview as a sectioned report."""
    header = f"📅 Daily Overview for {overview.as_of.strftime('%A, %B %d, %Y')}"

    if overview.total == 0:
        return f"{header}\n\n🎉 You're all caught up! No overdue, due, upcoming or completed tasks for today."

    sections = [header]
    for name, title in SECTION_TITLES.items():
        count = overview.counts.get(name, 0)
        if count == 0:
            continue

        shown = overview.bucket(name)
        lines = [f"{title} ({count})"]
        lines.extend(format_overview_line(task) for task in shown)
        if count > len(shown):
            lines.append(f"... and {count - len(shown)} more")
        sections.append("\n".join(lines))

    return "\n\n".join(sections)


def daily_overview_json(overview: DailyOverview) -> dict[str, Any]:
    return {
        "date": overview.as_of.isoformat(),
        "counts": overview.counts,
        **{
            name: [format_task_json(t) for t in overview.bucket(name)]
            for name in SECTION_TITLES
        },
    }
