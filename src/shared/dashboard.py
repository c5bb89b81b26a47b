"""Dashboard summary: per-entity counts, recent activity and completion flags.

Every sub-query runs concurrently on a worker thread and fails on its own:
a failing count becomes 0 and a failing activity feed becomes [], so one
broken query never takes the whole dashboard down.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Protocol

from shared import repositories
from shared.db import parse_timestamp

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 6

# Counts reported in stats/totals, in response order
STAT_KEYS = ("speakers", "agenda", "gallery", "sponsors", "organizers", "volunteers")
COMPLETION_KEYS = ("venue", "contact", "settings", "speakers", "sponsors", "agenda")


class Countable(Protocol):
    def count(self, year_id: str) -> int: ...


class RecentSource(Protocol):
    def recent(self, year_id: str, limit: int, fields: tuple[str, ...]) -> list[dict]: ...


@dataclass(frozen=True)
class ActivityFeed:
    """One "most recent N" query and how its rows are labelled."""

    type: str
    action: str
    source: RecentSource
    limit: int
    label_field: str
    fallback_label: str = ""


def default_counters() -> dict[str, Countable]:
    return {
        "speakers": repositories.speakers,
        "agenda": repositories.agenda,
        "gallery": repositories.gallery,
        "sponsors": repositories.sponsors,
        "organizers": repositories.organizers,
        "volunteers": repositories.volunteers,
        "venue": repositories.venues,
        "contact": repositories.contacts,
        "settings": repositories.settings,
    }


def default_feeds() -> list[ActivityFeed]:
    return [
        ActivityFeed("speaker", "Speaker added", repositories.speakers, 3, "name"),
        ActivityFeed("agenda", "Agenda updated", repositories.agenda, 2, "titleEn"),
        ActivityFeed("gallery", "Gallery updated", repositories.gallery, 2, "caption", "New image"),
        ActivityFeed("sponsor", "Sponsor added", repositories.sponsors, 2, "name"),
    ]


def _parse_time(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return parse_timestamp(str(value))


def merge_activity(
    batches: list[tuple[ActivityFeed, list[dict]]],
    limit: int = RECENT_ACTIVITY_LIMIT,
) -> list[dict]:
    """
    Flatten feed rows into activity entries, newest first.

    Rows whose label is empty are dropped. The sort is stable, so entries
    with equal timestamps keep feed order.
    """
    activity: list[dict] = []
    for feed, rows in batches:
        for row in rows:
            label = row.get(feed.label_field) or feed.fallback_label
            if not label:
                continue
            activity.append(
                {
                    "action": feed.action,
                    "item": label,
                    "time": row["createdAt"],
                    "type": feed.type,
                }
            )
    activity.sort(key=lambda entry: _parse_time(entry["time"]), reverse=True)
    return activity[:limit]


class DashboardReporter:
    def __init__(
        self,
        counters: dict[str, Countable] | None = None,
        feeds: list[ActivityFeed] | None = None,
    ):
        self.counters = counters if counters is not None else default_counters()
        self.feeds = feeds if feeds is not None else default_feeds()

    async def _gather(self, calls: list[tuple[str, Callable[[], Any]]], default: Any) -> list[Any]:
        results = await asyncio.gather(
            *(asyncio.to_thread(call) for _, call in calls),
            return_exceptions=True,
        )
        settled = []
        for (name, _), result in zip(calls, results):
            if isinstance(result, BaseException):
                logger.warning("Dashboard query %s failed: %s", name, result)
                settled.append(default)
            else:
                settled.append(result)
        return settled

    async def build(self, year_id: str) -> dict:
        count_calls = [
            (f"count:{name}", lambda counter=counter: counter.count(year_id))
            for name, counter in self.counters.items()
        ]
        feed_calls = [
            (
                f"recent:{feed.type}",
                lambda feed=feed: feed.source.recent(year_id, feed.limit, (feed.label_field,)),
            )
            for feed in self.feeds
        ]

        count_values, feed_rows = await asyncio.gather(
            self._gather(count_calls, 0),
            self._gather(feed_calls, []),
        )
        counts = {name: int(value or 0) for name, value in zip(self.counters, count_values)}

        recent_activity = merge_activity(list(zip(self.feeds, feed_rows)))
        stats = {key: counts.get(key, 0) for key in STAT_KEYS}

        return {
            "stats": stats,
            "recentActivity": recent_activity,
            "completionStatus": {key: counts.get(key, 0) > 0 for key in COMPLETION_KEYS},
            "totals": dict(stats),
        }
