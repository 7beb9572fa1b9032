"""Configurazione per l'applicazione di gestione delle spese familiari"""
import os
from datetime import timedelta


class Config:
    """Configurazione principale dell'applicazione"""

    # Database
    # Di default un file SQLite nella cartella `db/` alla root del progetto;
    # DATABASE_URL permette di puntare a un database esterno.
    BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        f'sqlite:///{os.path.join(BASE_DIR, "db", "spese.db")}'
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY', 'spese-familiari-dev-key')
    TESTING = False

    # Sessione
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    SESSION_COOKIE_HTTPONLY = True  # Cookie non accessibile da JavaScript
    SESSION_COOKIE_SAMESITE = 'Lax'  # Protezione CSRF

    # Server
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', 5001))

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    FORMATO_VALUTA = "€ {:.2f}"

    # Finestra massima (anni) per la generazione delle ricorrenze
    RECURRING_LIMIT_YEARS = 10

    # Validità di default degli inviti (giorni)
    INVITE_EXPIRES_DAYS = 7


class TestingConfig(Config):
    """Configurazione per i test: database in memoria"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SECRET_KEY = 'test'
    LOG_LEVEL = 'WARNING'


config = {
    'default': Config,
    'testing': TestingConfig,
}
