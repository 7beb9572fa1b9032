"""
Servizio base per la gestione della business logic
"""
import logging
from datetime import datetime

from spese import db

# Esporta le funzioni per l'import diretto
__all__ = ['BaseService']

logger = logging.getLogger(__name__)


class BaseService:
    """Classe base per i servizi con metodi comuni"""

    def __init__(self):
        self.db = db

    def save(self, obj):
        """Salva un oggetto nel database"""
        try:
            self.db.session.add(obj)
            self.db.session.commit()
            return True, "Operazione completata con successo"
        except Exception as e:
            self.db.session.rollback()
            logger.exception('Errore nel salvataggio di %r', obj)
            return False, str(e)

    def soft_delete(self, obj):
        """Marca un oggetto come eliminato senza rimuoverlo dal database"""
        try:
            obj.deleted_at = datetime.utcnow()
            self.db.session.commit()
            return True, "Eliminazione completata con successo"
        except Exception as e:
            self.db.session.rollback()
            logger.exception('Errore nell\'eliminazione di %r', obj)
            return False, str(e)

    def update(self, obj, **kwargs):
        """Aggiorna un oggetto con i parametri forniti"""
        try:
            for key, value in kwargs.items():
                if hasattr(obj, key):
                    setattr(obj, key, value)
            self.db.session.commit()
            return True, "Aggiornamento completato con successo"
        except Exception as e:
            self.db.session.rollback()
            logger.exception('Errore nell\'aggiornamento di %r', obj)
            return False, str(e)
