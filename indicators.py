import logging

import pandas as pd

from classifier import classify_status, status_chart_color, bu_chart_color
from models import CSV_COLUMNS
from targets import (
    STATUS_FINISHED, STATUS_IN_PROGRESS, STATUS_PARALYZED, STATUS_NOT_STARTED, MISSING_LABEL,
)

logger = logging.getLogger(__name__)

# --- Helper Functions ---
def records_to_frame(records):
    return pd.DataFrame([r.to_dict() for r in records], columns=CSV_COLUMNS)


def format_percentage(value, decimals=1):
    return f"{value:.{decimals}f}%"


def filter_projects(records, status='', bu='', client=''):
    """Exact-match filters; an empty value leaves that dimension unfiltered."""
    return [
        r for r in records
        if (not status or r.status == status)
        and (not bu or r.bus == bu)
        and (not client or r.cliente == client)
    ]


def counts_in_order(series):
    """Occurrences per label, in order of first appearance. Empty labels count as 'N/A'."""
    labels = series.fillna('').astype(str)
    labels = labels.where(labels != '', MISSING_LABEL)
    if labels.empty:
        return {}
    return {name: int(n) for name, n in labels.groupby(labels, sort=False).size().items()}


def build_chart_data(counts, color_fn):
    return [{'name': name, 'Projetos': n, 'color': color_fn(name)} for name, n in counts.items()]


def average_percent(series):
    """Mean of the known percentages; missing values are left out, not counted as 0."""
    values = pd.to_numeric(series, errors='coerce').dropna()
    return float(values.mean()) if not values.empty else 0.0

# --- Main Indicator Functions ---

def get_portfolio_kpis(records, kpis=None):
    if kpis is None:
        kpis = {}
    project_df = records_to_frame(records)

    kpis['total_projects'] = len(project_df)

    avg = average_percent(project_df['perc'])
    kpis['avg_percent'] = avg
    kpis['avg_percent_label'] = format_percentage(avg)

    buckets = project_df['STATUS'].map(classify_status)
    kpis['finished_count'] = int((buckets == STATUS_FINISHED).sum())
    kpis['in_progress_count'] = int((buckets == STATUS_IN_PROGRESS).sum())
    kpis['paralyzed_count'] = int((buckets == STATUS_PARALYZED).sum())
    kpis['not_started_count'] = int((buckets == STATUS_NOT_STARTED).sum())

    kpis['status_counts'] = counts_in_order(project_df['STATUS'])
    kpis['bu_counts'] = counts_in_order(project_df['BUs'])
    kpis['status_chart_data'] = build_chart_data(kpis['status_counts'], status_chart_color)
    kpis['bu_chart_data'] = build_chart_data(kpis['bu_counts'], bu_chart_color)

    if project_df.empty:
        logger.info("No projects in selection; KPIs are zeroed.")
    return kpis


def get_filter_options(records):
    """Distinct non-empty statuses, BUs and clients of the whole collection, sorted."""
    return {
        'statuses': sorted({r.status for r in records if r.status}),
        'bus': sorted({r.bus for r in records if r.bus}),
        'clients': sorted({r.cliente for r in records if r.cliente}),
    }
