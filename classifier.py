from csv_loader import normalize_status
from targets import (
    STATUS_FINISHED, STATUS_IN_PROGRESS, STATUS_PARALYZED, STATUS_NOT_STARTED, STATUS_DEFAULT,
    STATUS_STYLES, BU_COLOR_RULES, BU_FALLBACK_COLOR,
)

# Order matters: first prefix that matches wins
CANONICAL_STATUSES = [STATUS_FINISHED, STATUS_IN_PROGRESS, STATUS_PARALYZED, STATUS_NOT_STARTED]


def classify_status(status):
    """Canonical bucket for a status text, e.g. 'PARALIZADO - AGUARDANDO CLIENTE' -> 'PARALIZADO'."""
    normalized = normalize_status(status)
    for canonical in CANONICAL_STATUSES:
        if normalized.startswith(canonical):
            return canonical
    return STATUS_DEFAULT


def status_chart_color(status):
    return STATUS_STYLES[classify_status(status)]['chart']


def status_badge_style(status):
    return STATUS_STYLES[classify_status(status)]['pill']


def bu_chart_color(bu):
    normalized = (bu or '').strip().upper()
    for token, color in BU_COLOR_RULES:
        if token in normalized:
            return color
    return BU_FALLBACK_COLOR
