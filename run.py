"""Entry point per l'applicazione.

Questo script avvia l'app Flask. Le tabelle mancanti vengono create
all'avvio; con `INIT_DB=1` vengono anche ricreate da zero (solo sviluppo).
"""

import os
from spese import create_app, db


def init_database():
    """Ricrea le tabelle. Distruttivo: usare solo in fase di provisioning."""
    import spese.models  # noqa: F401 - registra i modelli
    db.drop_all()
    db.create_all()


def main():
    app = create_app(os.environ.get('APP_CONFIG', 'default'))

    if os.environ.get('INIT_DB') == '1':
        with app.app_context():
            init_database()
            app.logger.warning('Database reinizializzato (INIT_DB=1)')

    app.run(host=app.config.get('HOST', '0.0.0.0'), port=app.config.get('PORT', 5001),
            debug=os.environ.get('FLASK_DEBUG') == '1')


if __name__ == '__main__':
    main()
