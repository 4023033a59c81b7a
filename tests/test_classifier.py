import pytest

from classifier import classify_status, status_chart_color, status_badge_style, bu_chart_color
from targets import STATUS_STYLES


@pytest.mark.parametrize("status, bucket", [
    ("FINALIZADO", "FINALIZADO"),
    ("finalizado com pendências", "FINALIZADO"),
    ("EM ANDAMENTO", "EM ANDAMENTO"),
    ("PARALIZADO - AGUARDANDO CLIENTE", "PARALIZADO"),
    ("Não Iniciado", "NÃO INICIADO"),
    ("CANCELADO", "DEFAULT"),
    ("PROJETO FINALIZADO", "DEFAULT"),
    ("", "DEFAULT"),
    ("N/A", "DEFAULT"),
])
def test_status_prefix_classification(status, bucket):
    assert classify_status(status) == bucket


def test_status_colors_follow_bucket():
    assert status_chart_color("PARALIZADO - AGUARDANDO CLIENTE") == "#ef4444"
    assert status_chart_color("qualquer") == "#6b7280"
    assert status_badge_style("EM ANDAMENTO X") == STATUS_STYLES["EM ANDAMENTO"]["pill"]


@pytest.mark.parametrize("bu, color", [
    ("Infraestrutura", "#f97316"),
    (" segurança da informação ", "#10b981"),
    ("TI", "#0b5ed7"),
    ("AUTOMAÇÃO", "#6b7280"),
    ("Outros", "#8b949e"),
    ("", "#8b949e"),
])
def test_bu_colors(bu, color):
    assert bu_chart_color(bu) == color


def test_bu_precedence_checks_longer_names_before_ti():
    # "SEGURANÇA DE TI" contains both tokens; SEGURANÇA is checked first
    assert bu_chart_color("SEGURANÇA DE TI") == "#10b981"
    # "AUTOMAÇÃO" does not contain "TI", but "AUTOMAÇÃO TI" does and TI wins over AUTOMAÇÃO
    assert bu_chart_color("AUTOMAÇÃO TI") == "#0b5ed7"
