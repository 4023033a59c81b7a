from datetime import date

import pytest

from models import BuHours, DetailedProject, Step
from timeline import (
    get_timeline_info, overall_progress, hours_totals, hours_risk_level, hours_risk_color,
    hours_comparison_data, clamp_step_percent, sanitize_hours,
)


def test_midway_through_the_interval():
    info = get_timeline_info(date(2024, 1, 1), date(2024, 1, 11), today=date(2024, 1, 6))
    assert info.progress == pytest.approx(50.0)
    assert info.text == "Faltam 5 dias"


def test_one_day_left_is_singular():
    info = get_timeline_info(date(2024, 1, 1), date(2024, 1, 11), today=date(2024, 1, 10))
    assert info.text == "Faltam 1 dia"


def test_missing_or_inverted_dates():
    assert get_timeline_info(None, date(2024, 1, 1), today=date(2024, 1, 1)).text == "Datas não definidas"
    assert get_timeline_info(date(2024, 1, 1), None, today=date(2024, 1, 1)).progress == 0
    inverted = get_timeline_info(date(2024, 2, 1), date(2024, 1, 1), today=date(2024, 1, 15))
    assert inverted.progress == 0
    assert inverted.text == "Datas não definidas"


def test_zero_length_interval_on_end_date_is_complete():
    day = date(2024, 3, 1)
    info = get_timeline_info(day, day, today=day)
    assert info.progress == 100
    assert info.text == "Finaliza hoje"


def test_zero_length_interval_before_and_after():
    day = date(2024, 3, 1)
    before = get_timeline_info(day, day, today=date(2024, 2, 28))
    assert before.progress == 0
    assert before.text == "Inicia em 2 dias"
    after = get_timeline_info(day, day, today=date(2024, 3, 2))
    assert after.progress == 100
    assert after.text == "Finalizado há 1 dia"


def test_finished_and_not_started_are_clamped():
    finished = get_timeline_info(date(2024, 1, 1), date(2024, 1, 11), today=date(2024, 1, 21))
    assert finished.progress == 100
    assert finished.text == "Finalizado há 10 dias"
    upcoming = get_timeline_info(date(2024, 1, 10), date(2024, 1, 20), today=date(2024, 1, 9))
    assert upcoming.progress == 0
    assert upcoming.text == "Inicia em 1 dia"


def test_end_date_today():
    info = get_timeline_info(date(2024, 1, 1), date(2024, 1, 11), today=date(2024, 1, 11))
    assert info.progress == 100
    assert info.text == "Finaliza hoje"


def test_overall_progress():
    steps = [Step("Planejamento", 100), Step("Execução", 50), Step("", 0)]
    assert overall_progress(steps) == pytest.approx(50.0)
    assert overall_progress(steps, named_only=True) == pytest.approx(75.0)
    assert overall_progress([]) == 0


def test_hours_totals():
    project = DetailedProject(name="X", sold_hours=BuHours(10, 20, 30, 40), used_hours=BuHours(1, 2, 3, 4))
    assert hours_totals(project) == (100, 10)


@pytest.mark.parametrize("sold, used, level", [
    (100, 100, "at_risk"),
    (100, 80, "at_risk"),
    (100, 79, "normal"),
    (100, 101, "exceeded"),
    (0, 50, "normal"),
    (0, 0, "normal"),
])
def test_hours_risk_level(sold, used, level):
    assert hours_risk_level(sold, used) == level


def test_hours_risk_colors():
    assert hours_risk_color(100, 100) == "#eab308"
    assert hours_risk_color(100, 150) == "#ef4444"
    assert hours_risk_color(100, 10) == "#f97316"


def test_hours_comparison_rows():
    project = DetailedProject(name="X", sold_hours=BuHours(infra=10, sse=0, ti=5, aut=8),
                              used_hours=BuHours(infra=12, sse=3, ti=4, aut=1))
    rows = hours_comparison_data(project)
    assert [r['name'] for r in rows] == ["Infra", "Segurança", "TI", "Automação"]
    assert [r['risk'] for r in rows] == ["exceeded", "normal", "at_risk", "normal"]


@pytest.mark.parametrize("raw, expected", [("50", 50), (150, 100), (-3, 0), ("abc", 0), (None, 0)])
def test_clamp_step_percent(raw, expected):
    assert clamp_step_percent(raw) == expected


@pytest.mark.parametrize("raw, expected", [("12.5", 12.5), (-1, 0), ("x", 0), (0, 0)])
def test_sanitize_hours(raw, expected):
    assert sanitize_hours(raw) == expected
