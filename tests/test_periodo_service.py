import calendar
from datetime import date

import pytest

from spese.models.impostazioni import ImpostazioniUtente
from spese.services.periodo_service import (
    PeriodoService, compute_range, current_range, date_with_clamped_day,
    period_label, range_for_month, resolve_target_period,
)


def _d(s):
    return date.fromisoformat(s)


def test_clamped_day_february_non_leap():
    assert date_with_clamped_day(2025, 1, 30) == date(2025, 2, 28)


def test_clamped_day_february_leap():
    assert date_with_clamped_day(2024, 1, 31) == date(2024, 2, 29)


def test_clamped_day_keeps_valid_day():
    assert date_with_clamped_day(2025, 2, 15) == date(2025, 3, 15)


def test_clamped_day_wraps_year():
    assert date_with_clamped_day(2026, -1, 20) == date(2025, 12, 20)
    assert date_with_clamped_day(2025, 12, 5) == date(2026, 1, 5)


@pytest.mark.parametrize('year', [2024, 2025])
@pytest.mark.parametrize('month_index', range(12))
def test_start_day_one_is_calendar_month(year, month_index):
    r = compute_range(year, month_index, 1, True)
    last = calendar.monthrange(year, month_index + 1)[1]
    assert r == {
        'start': date(year, month_index + 1, 1).isoformat(),
        'end': date(year, month_index + 1, last).isoformat(),
    }


def test_inactive_ignores_start_day():
    assert compute_range(2026, 1, 20, False) == {'start': '2026-02-01', 'end': '2026-02-28'}


@pytest.mark.parametrize('year', [2024, 2025])
@pytest.mark.parametrize('start_day', range(2, 32))
def test_custom_period_bounds(year, start_day):
    for month_index in range(12):
        r = compute_range(year, month_index, start_day, True)
        start, end = _d(r['start']), _d(r['end'])

        prev_year, prev_month = (year - 1, 12) if month_index == 0 else (year, month_index)
        last_prev = calendar.monthrange(prev_year, prev_month)[1]
        last_curr = calendar.monthrange(year, month_index + 1)[1]

        assert (start.year, start.month) == (prev_year, prev_month)
        assert start.day == min(start_day, last_prev)
        assert (end.year, end.month) == (year, month_index + 1)
        assert end.day == min(start_day - 1, last_curr)
        assert start < end


def test_custom_period_january_wraps_to_december():
    assert compute_range(2026, 0, 20, True) == {'start': '2025-12-20', 'end': '2026-01-19'}


def test_custom_period_start_31_in_march():
    # 31 Febbraio non esiste: il periodo parte dall'ultimo giorno di Febbraio
    assert compute_range(2025, 2, 31, True) == {'start': '2025-02-28', 'end': '2025-03-30'}


def test_compute_range_is_idempotent():
    assert compute_range(2026, 5, 27, True) == compute_range(2026, 5, 27, True)


@pytest.mark.parametrize('today, expected', [
    (date(2026, 2, 17), {'start': '2026-01-20', 'end': '2026-02-19'}),
    (date(2026, 2, 21), {'start': '2026-02-20', 'end': '2026-03-19'}),
    (date(2026, 2, 20), {'start': '2026-02-20', 'end': '2026-03-19'}),
    (date(2026, 2, 19), {'start': '2026-01-20', 'end': '2026-02-19'}),
])
def test_resolve_then_compute(today, expected):
    year, month_index = resolve_target_period(today, 20)
    assert compute_range(year, month_index, 20, True) == expected


def test_resolve_december_rolls_to_next_year():
    assert resolve_target_period(date(2025, 12, 25), 20) == (2026, 0)
    assert compute_range(2026, 0, 20, True) == {'start': '2025-12-20', 'end': '2026-01-19'}


def test_resolve_before_start_day_keeps_month():
    assert resolve_target_period(date(2025, 12, 5), 20) == (2025, 11)


def test_current_range_custom_settings():
    settings = ImpostazioniUtente(custom_period_active=True, custom_period_start_day=20)
    assert current_range(settings, date(2026, 2, 17)) == {'start': '2026-01-20', 'end': '2026-02-19'}


def test_current_range_default_settings_is_calendar_month():
    assert current_range(ImpostazioniUtente(), date(2026, 2, 17)) == {'start': '2026-02-01', 'end': '2026-02-28'}


def test_current_range_active_with_start_day_one_is_current_month():
    settings = ImpostazioniUtente(custom_period_active=True, custom_period_start_day=1)
    assert current_range(settings, date(2026, 2, 17)) == {'start': '2026-02-01', 'end': '2026-02-28'}


def test_range_for_month_uses_picked_month_directly():
    settings = ImpostazioniUtente(custom_period_active=True, custom_period_start_day=27)
    assert range_for_month(settings, 2025, 10) == {'start': '2025-10-27', 'end': '2025-11-26'}


def test_periodo_service_target_and_range():
    svc = PeriodoService(ImpostazioniUtente(custom_period_active=True, custom_period_start_day=27))
    assert svc.target_corrente(date(2025, 10, 28)) == (2025, 10)
    assert svc.corrente(date(2025, 10, 28)) == {'start': '2025-10-27', 'end': '2025-11-26'}
    assert svc.mese(2025, 10) == svc.corrente(date(2025, 10, 28))


def test_period_label():
    assert period_label(2026, 1) == 'Febbraio 2026'
    assert period_label(2026, -1) == 'Dicembre 2025'
