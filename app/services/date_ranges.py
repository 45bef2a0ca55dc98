"""
Date range resolution for the dashboard.

One optional anchor date becomes three windows that share an end date:
the selected window (a single day unless the caller chose a start),
month-to-date and year-to-date.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from app.models.analytics import DateWindow

GA4_DATE_FORMAT = "%Y-%m-%d"

# GA4 data for the current day is usually incomplete
DEFAULT_ANCHOR_OFFSET_DAYS = 1


@dataclass(frozen=True)
class DateRanges:
    end_str: str
    mtd_start: str
    ytd_start: str
    today_str: str
    explicit_start: Optional[str] = None

    @property
    def selected(self) -> DateWindow:
        return DateWindow(self.explicit_start or self.today_str, self.end_str)

    @property
    def mtd(self) -> DateWindow:
        return DateWindow(self.mtd_start, self.end_str)

    @property
    def ytd(self) -> DateWindow:
        return DateWindow(self.ytd_start, self.end_str)

    @property
    def breakdown(self) -> DateWindow:
        """Window for traffic sources, top pages and categories.

        Month-to-date by default, the selected window when the caller
        picked an explicit start date.
        """
        return self.selected if self.explicit_start else self.mtd


def _format_date(d: date) -> str:
    """Format date to GA4 date string"""
    return d.strftime(GA4_DATE_FORMAT)


def _parse_date(value: str) -> Optional[date]:
    try:
        return datetime.strptime(value.strip(), GA4_DATE_FORMAT).date()
    except ValueError:
        return None


def resolve_date_ranges(
    end_date: Optional[str] = None,
    start_date: Optional[str] = None,
    today: Optional[date] = None,
) -> DateRanges:
    """
    Resolve the dashboard windows.

    Args:
        end_date: Anchor date (YYYY-MM-DD). Defaults to yesterday.
        start_date: Explicit start of the selected window.
        today: Server date override, for tests.

    Unparseable dates are passed through untouched so GA4 rejects the
    queries that use them; resolution itself never fails.
    """
    if end_date:
        anchor = _parse_date(end_date)
        if anchor is None:
            return DateRanges(
                end_str=end_date,
                mtd_start=end_date,
                ytd_start=end_date,
                today_str=end_date,
                explicit_start=start_date or None,
            )
    else:
        anchor = (today or date.today()) - timedelta(days=DEFAULT_ANCHOR_OFFSET_DAYS)

    end_str = _format_date(anchor)
    return DateRanges(
        end_str=end_str,
        mtd_start=_format_date(anchor.replace(day=1)),
        ytd_start=_format_date(anchor.replace(month=1, day=1)),
        today_str=end_str,
        explicit_start=start_date or None,
    )
