"""Applicazione Flask per la gestione delle spese familiari"""

import logging
import os

from flask import Flask, jsonify, request, session
from flask_sqlalchemy import SQLAlchemy
from spese.config import config

# Istanze globali
db = SQLAlchemy()


def create_app(config_name='default'):
    """Factory pattern per creare l'applicazione Flask"""
    app = Flask(__name__)

    app.config.from_object(config[config_name])

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    # Il file SQLite vive in `db/`: assicuriamoci che la cartella esista
    db_uri = app.config.get('SQLALCHEMY_DATABASE_URI', '')
    if db_uri.startswith('sqlite:///'):
        db_dir = os.path.dirname(db_uri[len('sqlite:///'):])
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    # Inizializza le estensioni
    db.init_app(app)

    # Importa e registra i blueprint
    from spese.views.main import main_bp
    from spese.views.spese.spese import spese_bp
    from spese.views.spese.analisi import analisi_bp
    from spese.views.utenti.impostazioni import impostazioni_bp
    from spese.views.utenti.inviti import inviti_bp
    from spese.views.utenti.gruppo import gruppo_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(spese_bp, url_prefix='/spese')
    app.register_blueprint(analisi_bp, url_prefix='/analisi')
    app.register_blueprint(impostazioni_bp, url_prefix='/impostazioni')
    app.register_blueprint(inviti_bp, url_prefix='/inviti')
    app.register_blueprint(gruppo_bp, url_prefix='/gruppo')

    # L'autenticazione è gestita dal front end di login: qui ci fidiamo
    # dell'utente salvato in sessione e rifiutiamo le richieste senza.
    @app.before_request
    def require_user():
        path = request.path or ''
        if path.startswith('/health') or path.startswith('/static'):
            return None
        if session.get('user_id'):
            return None
        return jsonify({'success': False, 'message': 'Utente non autenticato'}), 401

    # Crea le tabelle mancanti (best-effort, non distruttivo)
    with app.app_context():
        import spese.models  # noqa: F401 - registra i modelli
        db.create_all()

    app.logger.info('Applicazione spese avviata (config=%s)', config_name)
    return app
