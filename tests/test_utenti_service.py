import pytest

from spese import db
from spese.models.gruppo import Gruppo, UtenteGruppo
from spese.models.impostazioni import ImpostazioniUtente
from spese.services.utenti.gruppi_service import GruppiService
from spese.services.utenti.utenti_service import UtentiService


@pytest.fixture
def utenti(app):
    return UtentiService()


def test_register_user_with_group(app):
    res = GruppiService().register_user_with_group('luca', ' Bianchi ', 'Luca')
    assert res['success']
    gruppo = db.session.get(Gruppo, res['group_id'])
    assert gruppo.group_name == 'Bianchi'
    utente = UtenteGruppo.query.filter_by(user_id='luca').one()
    assert utente.group_id == gruppo.id
    assert utente.last_name is None
    assert [m.user_id for m in gruppo.membri] == ['luca']


def test_register_twice_fails(famiglia):
    res = GruppiService().register_user_with_group('mario', 'Altro', 'Mario')
    assert res == {'success': False, 'error': 'Utente già associato a un gruppo'}
    assert Gruppo.query.count() == 1


@pytest.mark.parametrize('group_name, first_name', [('', 'Luca'), ('Bianchi', '  ')])
def test_register_requires_names(app, group_name, first_name):
    res = GruppiService().register_user_with_group('luca', group_name, first_name)
    assert not res['success']
    assert Gruppo.query.count() == 0


def test_membership(famiglia):
    gruppi = GruppiService()
    assert gruppi.get_group_id('anna') == famiglia
    assert gruppi.get_group_id('nessuno') is None
    assert gruppi.is_member('mario', famiglia)
    assert not gruppi.is_member('nessuno', famiglia)


def test_profile(utenti, famiglia):
    profilo = utenti.get_profile('mario', email='mario@example.com')
    assert profilo == {
        'id': 'mario',
        'email': 'mario@example.com',
        'first_name': 'Mario',
        'last_name': 'Rossi',
        'group_id': famiglia,
        'group_name': 'Rossi',
    }


def test_profile_of_unknown_user(utenti):
    profilo = utenti.get_profile('sconosciuto')
    assert profilo['first_name'] == ''
    assert profilo['group_id'] is None
    assert utenti.get_profile('') is None


def test_update_profile(utenti, famiglia):
    success, _ = utenti.update_profile('anna', last_name='Verdi')
    assert success
    profilo = utenti.get_profile('anna')
    assert profilo['first_name'] == 'Anna'
    assert profilo['last_name'] == 'Verdi'


def test_settings_default_when_missing(utenti):
    assert utenti.get_settings('sconosciuto') == ImpostazioniUtente()
    assert utenti.get_settings('sconosciuto').custom_period_start_day == 1


def test_update_settings_partial(utenti, famiglia):
    success, _ = utenti.update_settings('mario', {'custom_period_active': True, 'custom_period_start_day': 20})
    assert success
    impostazioni = utenti.get_settings('mario')
    assert impostazioni.custom_period_active is True
    assert impostazioni.custom_period_start_day == 20
    assert impostazioni.periodo_personalizzato
    assert impostazioni.notification_time == '19:30'
    # le impostazioni degli altri membri non cambiano
    assert not utenti.get_settings('anna').periodo_personalizzato


def test_update_settings_creates_row(utenti):
    success, _ = utenti.update_settings('nuovo', {'dark_mode': True})
    assert success
    assert utenti.get_settings('nuovo').dark_mode is True


@pytest.mark.parametrize('updates', [
    {'dark_mode': 'si'},
    {'custom_period_start_day': 0},
    {'custom_period_start_day': 32},
    {'custom_period_start_day': 'venti'},
    {'notification_time': '25:00'},
    {'notification_time': '7:30'},
    {'colore': 'blu'},
])
def test_update_settings_rejects_invalid(utenti, famiglia, updates):
    success, message = utenti.update_settings('mario', updates)
    assert not success
    assert message
    assert utenti.get_settings('mario') == ImpostazioniUtente()


def test_start_day_one_is_not_custom_period():
    impostazioni = ImpostazioniUtente(custom_period_active=True, custom_period_start_day=1)
    assert not impostazioni.periodo_personalizzato
