import pytest

from spese import create_app, db
from spese.services.utenti.gruppi_service import GruppiService


@pytest.fixture
def app():
    # Database SQLite in memoria, nuovo per ogni test
    app = create_app('testing')
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, user_id):
    with client.session_transaction() as sess:
        sess['user_id'] = user_id


@pytest.fixture
def famiglia(app):
    """Gruppo 'Rossi' con due membri: mario (creatore) e anna"""
    gruppi = GruppiService()
    res = gruppi.register_user_with_group('mario', 'Rossi', 'Mario', 'Rossi')
    assert res['success']
    from spese.models.gruppo import UtenteGruppo
    db.session.add(UtenteGruppo(user_id='anna', first_name='Anna', group_id=res['group_id']))
    db.session.commit()
    return res['group_id']


@pytest.fixture
def auth_client(client, famiglia):
    login(client, 'mario')
    return client
