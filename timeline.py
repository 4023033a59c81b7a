"""Timeline progress, step progress and sold-vs-used hours for monitored projects."""

import math
from dataclasses import dataclass
from datetime import date

from targets import HOURS_AT_RISK_RATIO, HOURS_RISK_COLORS, BU_HOURS_LABELS

NO_DATES_TEXT = "Datas não definidas"
ENDS_TODAY_TEXT = "Finaliza hoje"


@dataclass(frozen=True)
class TimelineInfo:
    progress: float
    text: str


def _days(n):
    return f"{n} dia{'s' if n != 1 else ''}"


def get_timeline_info(start, end, today=None):
    """Share of the start..end interval already elapsed, plus a short status text.

    Dates are calendar days. Missing dates or start after end give 0% and
    "Datas não definidas". A zero-length interval reads 100% from the end date on.
    """
    if today is None:
        today = date.today()
    if start is None or end is None or start > end:
        return TimelineInfo(0, NO_DATES_TEXT)

    total_days = (end - start).days
    if total_days > 0:
        progress = max(0.0, min(100.0, (today - start).days / total_days * 100))
    else:
        progress = 100.0 if today >= end else 0.0

    remaining_days = (end - today).days

    if today > end:
        days_past = abs(remaining_days)
        text = ENDS_TODAY_TEXT if days_past == 0 else f"Finalizado há {_days(days_past)}"
    elif today < start:
        days_to_start = (start - today).days
        text = f"Inicia em {_days(days_to_start)}"
    else:
        text = ENDS_TODAY_TEXT if remaining_days == 0 else f"Faltam {_days(remaining_days)}"

    return TimelineInfo(progress, text)


def overall_progress(steps, named_only=False):
    """Mean step percentage (0 with no steps). ``named_only`` ignores steps with a blank name."""
    if named_only:
        steps = [s for s in steps if s.name.strip()]
    if not steps:
        return 0
    return sum(s.perc for s in steps) / len(steps)


def hours_totals(project):
    return project.sold_hours.total, project.used_hours.total


def hours_risk_level(sold, used):
    """'exceeded' when used > sold, 'at_risk' from 80% of sold, else 'normal'. Nothing sold is always normal."""
    if sold > 0:
        if used > sold:
            return 'exceeded'
        if used / sold >= HOURS_AT_RISK_RATIO:
            return 'at_risk'
    return 'normal'


def hours_risk_color(sold, used):
    return HOURS_RISK_COLORS[hours_risk_level(sold, used)]


def hours_comparison_data(project):
    used = project.used_hours.to_dict()
    rows = []
    for bu, sold in project.sold_hours.items():
        rows.append({
            'bu': bu,
            'name': BU_HOURS_LABELS[bu],
            'Vendidas': sold,
            'Utilizadas': used[bu],
            'risk': hours_risk_level(sold, used[bu]),
            'color': hours_risk_color(sold, used[bu]),
        })
    return rows


def clamp_step_percent(value):
    """Edit-path coercion for a step percentage: numeric, within 0..100."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number):
        return 0
    return max(0, min(100, number))


def sanitize_hours(value):
    """Edit-path coercion for hours: numeric and non-negative."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number) or number < 0:
        return 0
    return number
