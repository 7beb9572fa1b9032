"""
Service per i gruppi familiari: appartenenza e registrazione di un nuovo gruppo.
"""
import logging
from typing import Optional

from spese import db
from spese.models.gruppo import Gruppo, UtenteGruppo
from spese.utils import SecurityUtils

logger = logging.getLogger(__name__)


class GruppiService:
    """Service per gestire i gruppi degli utenti"""

    def get_group_id(self, user_id: str) -> Optional[int]:
        """Restituisce l'ID del gruppo dell'utente, None se non appartiene a nessun gruppo"""
        if not user_id:
            return None
        utente = UtenteGruppo.query.filter_by(user_id=user_id).first()
        if utente and utente.group_id:
            return utente.group_id
        return None

    def get_group(self, group_id: int) -> Optional[Gruppo]:
        return db.session.get(Gruppo, group_id)

    def is_member(self, user_id: str, group_id: int) -> bool:
        return self.get_group_id(user_id) == group_id

    def register_user_with_group(self, user_id: str, group_name: str, first_name: str,
                                 last_name: str = None) -> dict:
        """
        Registra un utente creando un nuovo gruppo di cui diventa membro

        Args:
            user_id: ID dell'utente (dal sistema di autenticazione)
            group_name: Nome del nuovo gruppo
            first_name: Nome dell'utente
            last_name: Cognome (opzionale)

        Returns:
            Dict con 'success' e 'group_id' oppure 'error'
        """
        group_name = SecurityUtils.sanitize_string(group_name, 100)
        first_name = SecurityUtils.sanitize_string(first_name, 100)
        if not user_id:
            return {'success': False, 'error': 'Utente non valido'}
        if not group_name:
            return {'success': False, 'error': 'Il nome del gruppo è obbligatorio'}
        if not first_name:
            return {'success': False, 'error': 'Il nome è obbligatorio'}

        try:
            utente = UtenteGruppo.query.filter_by(user_id=user_id).first()
            if utente and utente.group_id:
                return {'success': False, 'error': 'Utente già associato a un gruppo'}

            gruppo = Gruppo(group_name=group_name)
            db.session.add(gruppo)
            db.session.flush()

            if utente is None:
                utente = UtenteGruppo(user_id=user_id)
                db.session.add(utente)
            utente.first_name = first_name
            utente.last_name = SecurityUtils.sanitize_string(last_name, 100) or None
            utente.group_id = gruppo.id

            db.session.commit()
            logger.info('Creato gruppo %s (%s) per utente %s', gruppo.id, group_name, user_id)
            return {'success': True, 'group_id': gruppo.id}
        except Exception as e:
            db.session.rollback()
            logger.exception('Errore nella registrazione del gruppo per %s', user_id)
            return {'success': False, 'error': f"Errore nella registrazione: {str(e)}"}
