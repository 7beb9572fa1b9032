from datetime import date, timedelta

import pytest

from spese.services.spese.ricorrenze_service import (
    RegolaRicorrenza, build_occurrences, expand, get_end_bound,
    normalize_start_date, template_confirmed,
)


def _template(data_spesa, **extra):
    template = {
        'id': 42,
        'user_id': 'mario',
        'group_id': 1,
        'importo': 12.5,
        'ambito': 'Casa',
        'negozio': 'Enel',
        'note_spese': 'bolletta',
        'data_spesa': data_spesa,
        'tipo_spesa': 'C',
        'tipo_transazione': 'spesa',
    }
    template.update(extra)
    return template


def test_weekly_weekdays_moves_template_to_first_selected_day():
    # 2025-01-01 è mercoledì: i giorni scelti sono lunedì e venerdì
    regola = RegolaRicorrenza('settimanale', '2025-01-01', giorni_settimana=[1, 5])
    data_template, occorrenze = build_occurrences(_template('2025-01-01'), regola)

    assert data_template == date(2025, 1, 3)
    serie = [data_template] + [o['data_spesa'] for o in occorrenze[:2]]
    assert serie == [date(2025, 1, 3), date(2025, 1, 6), date(2025, 1, 10)]
    assert all(o['data_spesa'].isoweekday() in (1, 5) for o in occorrenze)


def test_weekly_weekdays_start_already_selected_is_kept():
    regola = RegolaRicorrenza('settimanale', '2025-01-06', giorni_settimana=[1, 5])
    assert normalize_start_date(date(2025, 1, 6), regola) == date(2025, 1, 6)
    primi = []
    for giorno in expand(date(2025, 1, 6), regola):
        primi.append(giorno)
        if len(primi) == 3:
            break
    assert primi == [date(2025, 1, 10), date(2025, 1, 13), date(2025, 1, 17)]


def test_normalize_ignored_without_weekdays():
    regola = RegolaRicorrenza('settimanale', '2025-01-01')
    assert normalize_start_date(date(2025, 1, 1), regola) == date(2025, 1, 1)
    mensile = RegolaRicorrenza('mensile', '2025-01-01')
    assert normalize_start_date(date(2025, 1, 1), mensile) == date(2025, 1, 1)


def test_weekly_without_weekdays_steps_seven_days():
    regola = RegolaRicorrenza('settimanale', '2025-01-01', data_fine='2025-01-29')
    assert list(expand(date(2025, 1, 1), regola)) == [
        date(2025, 1, 8), date(2025, 1, 15), date(2025, 1, 22), date(2025, 1, 29),
    ]


def test_monthly_from_31st_clamps_and_caps_at_ten_years():
    regola = RegolaRicorrenza('mensile', '2025-01-31')
    date_generate = list(expand(date(2025, 1, 31), regola))

    assert len(date_generate) == 120
    assert date_generate[0] == date(2025, 2, 28)
    assert date_generate[1] == date(2025, 3, 31)
    assert date_generate[-1] == date(2035, 1, 31)
    assert date_generate == sorted(date_generate)


def test_annual_from_leap_day():
    regola = RegolaRicorrenza('annuale', '2024-02-29')
    date_generate = list(expand(date(2024, 2, 29), regola))
    assert date_generate[0] == date(2025, 2, 28)
    assert date_generate[3] == date(2028, 2, 29)
    assert len(date_generate) == 10


@pytest.mark.parametrize('ricorrenza, attese', [
    ('giornaliera', [date(2025, 1, 16), date(2025, 1, 17)]),
    ('bimestrale', [date(2025, 3, 15), date(2025, 5, 15)]),
    ('trimestrale', [date(2025, 4, 15), date(2025, 7, 15)]),
    ('semestrale', [date(2025, 7, 15), date(2026, 1, 15)]),
    ('annuale', [date(2026, 1, 15), date(2027, 1, 15)]),
])
def test_fixed_steps(ricorrenza, attese):
    regola = RegolaRicorrenza(ricorrenza, '2025-01-15')
    assert list(expand(date(2025, 1, 15), regola))[:2] == attese


def test_daily_count_with_end_date():
    regola = RegolaRicorrenza('giornaliera', '2025-01-01', data_fine='2025-01-10')
    assert len(list(expand(date(2025, 1, 1), regola))) == 9


def test_end_date_is_inclusive():
    regola = RegolaRicorrenza('mensile', '2025-01-15', data_fine='2025-04-15')
    assert list(expand(date(2025, 1, 15), regola)) == [
        date(2025, 2, 15), date(2025, 3, 15), date(2025, 4, 15),
    ]


def test_end_date_beyond_safety_window_is_capped():
    regola = RegolaRicorrenza('annuale', '2025-03-01', data_fine='2050-03-01')
    assert get_end_bound(date(2025, 3, 1), regola) == date(2035, 3, 1)
    date_generate = list(expand(date(2025, 3, 1), regola))
    assert len(date_generate) == 10
    assert date_generate[-1] == date(2035, 3, 1)


def test_daily_open_ended_stays_within_ten_years():
    regola = RegolaRicorrenza('giornaliera', '2025-01-01')
    date_generate = list(expand(date(2025, 1, 1), regola))
    assert date_generate[-1] == date(2035, 1, 1)
    assert len(date_generate) == (date(2035, 1, 1) - date(2025, 1, 1)).days


def test_end_date_before_next_occurrence_gives_nothing():
    regola = RegolaRicorrenza('mensile', '2025-01-10', data_fine='2025-02-05', tipo_conferma='M')
    data_template, occorrenze = build_occurrences(_template('2025-01-10'), regola)
    assert data_template == date(2025, 1, 10)
    assert occorrenze == []
    assert template_confirmed(True, regola) is False


def test_end_date_before_start_gives_nothing():
    regola = RegolaRicorrenza('giornaliera', '2025-01-10', data_fine='2024-12-31')
    assert list(expand(date(2025, 1, 10), regola)) == []


def test_non_positive_window_gives_nothing():
    regola = RegolaRicorrenza('giornaliera', '2025-01-10')
    assert list(expand(date(2025, 1, 10), regola, limite_anni=0)) == []


def test_start_date_never_emitted():
    regola = RegolaRicorrenza('settimanale', '2025-01-06', giorni_settimana=[1, 2, 3, 4, 5, 6, 7],
                              data_fine='2025-01-09')
    assert list(expand(date(2025, 1, 6), regola)) == [
        date(2025, 1, 7), date(2025, 1, 8), date(2025, 1, 9),
    ]


def test_expand_is_deterministic_and_restartable():
    regola = RegolaRicorrenza('settimanale', '2025-01-01', giorni_settimana=[2, 4], data_fine='2025-06-30')
    primo = list(expand(date(2025, 1, 1), regola))
    secondo = list(expand(date(2025, 1, 1), regola))
    assert primo == secondo
    assert build_occurrences(_template('2025-01-01'), regola) == build_occurrences(_template('2025-01-01'), regola)


def test_occurrence_records_copy_template():
    regola = RegolaRicorrenza('mensile', '2025-01-15', data_fine='2025-03-15')
    _, occorrenze = build_occurrences(_template('2025-01-15'), regola)

    assert [o['data_spesa'] for o in occorrenze] == [date(2025, 2, 15), date(2025, 3, 15)]
    for o in occorrenze:
        assert o['importo'] == 12.5
        assert o['ambito'] == 'Casa'
        assert o['negozio'] == 'Enel'
        assert o['note_spese'] == 'bolletta'
        assert o['tipo_spesa'] == 'C'
        assert o['tipo_transazione'] == 'spesa'
        assert o['user_id'] == 'mario'
        assert o['group_id'] == 1
        assert o['is_recurring_parent'] is False
        assert o['recurring_parent_id'] == 42
        assert o['recurring_config'] is None
        assert o['ricorrente'] is True
        assert o['confermata'] is True


def test_manual_confirmation_marks_occurrences_unconfirmed():
    regola = RegolaRicorrenza('mensile', '2025-01-15', data_fine='2025-03-15', tipo_conferma='M')
    _, occorrenze = build_occurrences(_template('2025-01-15'), regola)
    assert [o['confermata'] for o in occorrenze] == [False, False]
    assert template_confirmed(True, regola) is False


def test_auto_confirmation_keeps_template_flag():
    regola = RegolaRicorrenza('mensile', '2025-01-15')
    assert template_confirmed(True, regola) is True
    assert template_confirmed(False, regola) is False


def test_weekdays_dropped_for_non_weekly():
    regola = RegolaRicorrenza('mensile', '2025-01-15', giorni_settimana=[1, 3])
    assert regola.giorni_settimana == []
    assert 'giorni_settimana' not in regola.to_dict()


def test_weekdays_sorted_and_deduplicated():
    regola = RegolaRicorrenza('settimanale', '2025-01-15', giorni_settimana=[5, 1, 5])
    assert regola.giorni_settimana == [1, 5]


@pytest.mark.parametrize('kwargs', [
    {'ricorrenza': 'quindicinale'},
    {'tipo_conferma': 'X'},
    {'ricorrenza': 'settimanale', 'giorni_settimana': [0]},
    {'ricorrenza': 'settimanale', 'giorni_settimana': [8]},
    {'data_fine': '31/12/2025'},
])
def test_invalid_rule_raises(kwargs):
    params = {'ricorrenza': 'mensile', 'data_inizio': '2025-01-15'}
    params.update(kwargs)
    with pytest.raises(ValueError):
        RegolaRicorrenza(**params)


def test_from_dict_uses_template_date():
    regola = RegolaRicorrenza.from_dict(
        {'ricorrenza': 'settimanale', 'data_inizio': '2020-01-01', 'data_fine': None,
         'tipo_conferma': 'M', 'giorni_settimana': [1, 5]},
        data_inizio=date(2025, 1, 1)
    )
    assert regola.data_inizio == date(2025, 1, 1)
    assert regola.to_dict() == {
        'ricorrenza': 'settimanale',
        'data_inizio': '2025-01-01',
        'data_fine': None,
        'tipo_conferma': 'M',
        'giorni_settimana': [1, 5],
    }


def test_from_dict_requires_start_date():
    with pytest.raises(ValueError):
        RegolaRicorrenza.from_dict({'ricorrenza': 'mensile'})


def test_weekly_scan_covers_every_selected_day_once():
    regola = RegolaRicorrenza('settimanale', '2025-01-06', giorni_settimana=[3], data_fine='2025-03-31')
    date_generate = list(expand(date(2025, 1, 6), regola))
    assert all(b - a == timedelta(days=7) for a, b in zip(date_generate, date_generate[1:]))
    assert date_generate[0] == date(2025, 1, 8)
    assert date_generate[-1] == date(2025, 3, 26)
