import pytest

from indicators import (
    filter_projects, get_portfolio_kpis, get_filter_options, records_to_frame, counts_in_order,
)
from models import ProjectRecord


@pytest.fixture
def records():
    return [
        ProjectRecord(cliente="Acme", bus="INFRAESTRUTURA", status="FINALIZADO", perc=50),
        ProjectRecord(cliente="Beta", bus="TI", status="EM ANDAMENTO", perc=None),
        ProjectRecord(cliente="Acme", bus="INFRAESTRUTURA", status="PARALIZADO - AGUARDANDO CLIENTE", perc=100),
        ProjectRecord(cliente="Gama", bus="", status="", perc=None),
        ProjectRecord(cliente="Delta", bus="SEGURANÇA", status="NÃO INICIADO EM 2024", perc=None),
    ]


def test_average_ignores_missing_percentages():
    kpis = get_portfolio_kpis([
        ProjectRecord(cliente="a", perc=50),
        ProjectRecord(cliente="b", perc=None),
        ProjectRecord(cliente="c", perc=100),
    ])
    assert kpis['avg_percent'] == 75.0
    assert kpis['avg_percent_label'] == "75.0%"


def test_canonical_counts_use_prefix_match(records):
    kpis = get_portfolio_kpis(records)
    assert kpis['total_projects'] == 5
    assert kpis['finished_count'] == 1
    assert kpis['in_progress_count'] == 1
    assert kpis['paralyzed_count'] == 1
    assert kpis['not_started_count'] == 1


def test_chart_data_keeps_literal_labels_in_first_seen_order(records):
    kpis = get_portfolio_kpis(records)
    assert [d['name'] for d in kpis['status_chart_data']] == [
        "FINALIZADO", "EM ANDAMENTO", "PARALIZADO - AGUARDANDO CLIENTE", "N/A", "NÃO INICIADO EM 2024",
    ]
    assert kpis['status_chart_data'][2]['color'] == "#ef4444"
    assert kpis['status_chart_data'][3]['color'] == "#6b7280"

    assert kpis['bu_counts'] == {"INFRAESTRUTURA": 2, "TI": 1, "N/A": 1, "SEGURANÇA": 1}
    colors = {d['name']: d['color'] for d in kpis['bu_chart_data']}
    assert colors == {"INFRAESTRUTURA": "#f97316", "TI": "#0b5ed7", "N/A": "#8b949e", "SEGURANÇA": "#10b981"}
    assert all(d['Projetos'] >= 1 for d in kpis['bu_chart_data'])


def test_empty_collection():
    kpis = get_portfolio_kpis([])
    assert kpis['total_projects'] == 0
    assert kpis['avg_percent_label'] == "0.0%"
    assert kpis['finished_count'] == 0
    assert kpis['status_chart_data'] == []
    assert kpis['bu_chart_data'] == []


def test_filters_are_exact_matches(records):
    assert len(filter_projects(records, client="Acme")) == 2
    assert len(filter_projects(records, status="PARALIZADO")) == 0
    assert len(filter_projects(records, status="PARALIZADO - AGUARDANDO CLIENTE")) == 1
    assert len(filter_projects(records, client="Acme", bu="TI")) == 0
    assert filter_projects(records) == records


def test_filter_options_come_from_full_collection(records):
    options = get_filter_options(records)
    assert options['clients'] == ["Acme", "Beta", "Delta", "Gama"]
    assert options['bus'] == ["INFRAESTRUTURA", "SEGURANÇA", "TI"]
    assert "" not in options['statuses']
    assert options['statuses'] == sorted(options['statuses'])
    # Unaffected by whatever subset is currently shown
    filtered = filter_projects(records, client="Beta")
    assert get_portfolio_kpis(filtered)['total_projects'] == 1
    assert get_filter_options(records) == options


def test_records_to_frame_columns(records):
    df = records_to_frame(records)
    assert list(df.columns) == ['CLIENTE', 'TIPO DE PROJETO', 'TIPO DE PRODUTO', 'BUs', 'C.Custo', 'STATUS', 'perc']
    assert len(df) == 5


def test_counts_in_order_empty_series():
    assert counts_in_order(records_to_frame([])['STATUS']) == {}
