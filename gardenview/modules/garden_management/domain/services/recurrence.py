# 📄 File: gardenview/modules/garden_management/domain/services/recurrence.py
# 🧭 Purpose (Layman Explanation):
# Works out the dates of repeating notebook tasks ("water the lemon tree every two
# weeks") for the coming year, and spots series that are about to run out of dates.
# 🧪 Purpose (Technical Summary):
# Pure date arithmetic for recurring TASK series: interval stepping (days or calendar
# months), occurrence generation up to a horizon, series grouping, extension detection
# and "this and future" selection for edits and deletes.
# 🔗 Dependencies:
# datetime, typing, gardenview.shared.utils.helpers (add_months)
# 🔄 Connected Modules / Calls From:
# notebook handlers, tests

from datetime import date, timedelta
from typing import Dict, List, NamedTuple

from gardenview.shared.utils.helpers import add_months
from ..models.notebook import NotebookEntry, Recurrence

# Safety net against runaway generation for a single series.
MAX_OCCURRENCES = 60

_DAY_STEPS = {
    Recurrence.WEEKLY: 7,
    Recurrence.BIWEEKLY: 14,
    Recurrence.FOURWEEKLY: 28,
}

_MONTH_STEPS = {
    Recurrence.MONTHLY: 1,
    Recurrence.QUARTERLY: 3,
    Recurrence.YEARLY: 12,
}


class SeriesExtension(NamedTuple):
    """A series that needs more occurrences, and where to continue from."""
    template: NotebookEntry
    last_date: date


def nth_occurrence(start: date, recurrence: Recurrence, n: int) -> date:
    """
    Date of the n-th repeat after ``start`` (n=0 is ``start`` itself).

    Month-based intervals are computed from the start date, so a series
    starting on the 31st stays at month end instead of drifting.
    """
    if recurrence in _DAY_STEPS:
        return start + timedelta(days=_DAY_STEPS[recurrence] * n)
    if recurrence in _MONTH_STEPS:
        return add_months(start, _MONTH_STEPS[recurrence] * n)
    raise ValueError(f"'{recurrence}' is not a repeating interval")


def occurrence_dates(start: date, recurrence: Recurrence, horizon_end: date) -> List[date]:
    """
    Dates after ``start`` up to and including ``horizon_end``.

    ``start`` itself is not included. At most MAX_OCCURRENCES dates are returned.
    """
    if recurrence == Recurrence.NONE:
        return []

    dates = []
    for n in range(1, MAX_OCCURRENCES + 1):
        next_date = nth_occurrence(start, recurrence, n)
        if next_date > horizon_end:
            break
        dates.append(next_date)
    return dates


def dates_after(start: date, recurrence: Recurrence, after: date, horizon_end: date) -> List[date]:
    """
    Occurrences of a series anchored at ``start`` that fall in (``after``, ``horizon_end``].

    Used to continue an existing series; at most MAX_OCCURRENCES dates.
    """
    if recurrence == Recurrence.NONE:
        return []

    dates = []
    n = 1
    while len(dates) < MAX_OCCURRENCES:
        next_date = nth_occurrence(start, recurrence, n)
        if next_date > horizon_end:
            break
        if next_date > after:
            dates.append(next_date)
        n += 1
    return dates


def horizon_end(today: date, horizon_days: int) -> date:
    return today + timedelta(days=horizon_days)


def group_series(entries: List[NotebookEntry]) -> Dict[str, List[NotebookEntry]]:
    """Recurring tasks grouped by series id, each group sorted by date."""
    series: Dict[str, List[NotebookEntry]] = {}
    for entry in entries:
        if entry.is_recurring and entry.original_parent_id:
            series.setdefault(entry.series_id, []).append(entry)
    for items in series.values():
        items.sort(key=lambda item: item.date)
    return series


def series_needing_extension(
    entries: List[NotebookEntry],
    today: date,
    horizon_days: int,
    margin_days: int,
) -> List[SeriesExtension]:
    """
    Series whose last occurrence falls before ``today + horizon - margin``.

    The earliest entry of each series serves as the template for new instances.
    """
    threshold = horizon_end(today, horizon_days) - timedelta(days=margin_days)
    extensions = []
    for items in group_series(entries).values():
        last_date = items[-1].date
        if last_date < threshold:
            extensions.append(SeriesExtension(template=items[0], last_date=last_date))
    return extensions


def this_and_future(entry: NotebookEntry, entries: List[NotebookEntry]) -> List[NotebookEntry]:
    """
    The given entry plus every later entry of the same series.

    Entries outside a series yield just themselves.
    """
    if not entry.original_parent_id:
        return [entry]
    return [
        item for item in entries
        if item.series_id == entry.series_id and item.date >= entry.date
    ]
