"""
Service per profilo e impostazioni dell'utente (riga `users_group`).
"""
import logging
import re
from typing import Tuple, Optional

from spese import db
from spese.models.gruppo import UtenteGruppo
from spese.models.impostazioni import ImpostazioniUtente
from spese.utils import SecurityUtils, ValidationUtils

logger = logging.getLogger(__name__)

CAMPI_BOOLEANI = (
    'notifications_enabled', 'dark_mode', 'del_confirm',
    'show_shared_expenses', 'show_personal_expenses', 'custom_period_active',
)

ORARIO_RE = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


class UtentiService:
    """Service per gestire profilo e impostazioni degli utenti"""

    def _get_or_create(self, user_id: str) -> UtenteGruppo:
        utente = UtenteGruppo.query.filter_by(user_id=user_id).first()
        if utente is None:
            utente = UtenteGruppo(user_id=user_id)
            db.session.add(utente)
        return utente

    def get_profile(self, user_id: str, email: str = None) -> Optional[dict]:
        """
        Recupera il profilo dell'utente

        Returns:
            Dict con id, email, nome, cognome e gruppo; None se utente non valido
        """
        if not user_id:
            return None
        utente = UtenteGruppo.query.filter_by(user_id=user_id).first()
        gruppo = utente.gruppo if utente else None
        return {
            'id': user_id,
            'email': email or '',
            'first_name': (utente.first_name if utente else None) or '',
            'last_name': (utente.last_name if utente else None) or '',
            'group_id': utente.group_id if utente else None,
            'group_name': gruppo.group_name if gruppo else None,
        }

    def update_profile(self, user_id: str, first_name: str = None, last_name: str = None) -> Tuple[bool, str]:
        """Aggiorna nome e cognome dell'utente"""
        try:
            utente = self._get_or_create(user_id)
            if first_name is not None:
                utente.first_name = SecurityUtils.sanitize_string(first_name, 100)
            if last_name is not None:
                utente.last_name = SecurityUtils.sanitize_string(last_name, 100)
            db.session.commit()
            return True, "Profilo aggiornato con successo"
        except Exception as e:
            db.session.rollback()
            logger.exception('Errore nell\'aggiornamento del profilo di %s', user_id)
            return False, f"Errore durante l'aggiornamento: {str(e)}"

    def get_settings(self, user_id: str) -> ImpostazioniUtente:
        """Impostazioni dell'utente; i valori mancanti prendono il default"""
        utente = UtenteGruppo.query.filter_by(user_id=user_id).first() if user_id else None
        return ImpostazioniUtente.from_row(utente)

    def update_settings(self, user_id: str, updates: dict) -> Tuple[bool, str]:
        """
        Aggiorna le impostazioni dell'utente

        Args:
            user_id: ID dell'utente
            updates: dict parziale con le impostazioni da modificare

        Returns:
            Tuple (success: bool, message: str)
        """
        if not isinstance(updates, dict):
            return False, "Impostazioni non valide"

        valori = {}
        try:
            for campo, valore in updates.items():
                if campo in CAMPI_BOOLEANI:
                    if not isinstance(valore, bool):
                        raise ValueError(f"Il campo {campo} deve essere vero o falso")
                    valori[campo] = valore
                elif campo == 'custom_period_start_day':
                    valori[campo] = ValidationUtils.validate_day_of_month(valore, campo)
                elif campo == 'notification_time':
                    if not isinstance(valore, str) or not ORARIO_RE.match(valore):
                        raise ValueError("Orario notifica non valido (HH:MM)")
                    valori[campo] = valore
                else:
                    raise ValueError(f"Impostazione sconosciuta: {campo}")
        except ValueError as e:
            return False, str(e)

        try:
            utente = self._get_or_create(user_id)
            for campo, valore in valori.items():
                setattr(utente, campo, valore)
            db.session.commit()
            return True, "Impostazioni aggiornate con successo"
        except Exception as e:
            db.session.rollback()
            logger.exception('Errore nell\'aggiornamento delle impostazioni di %s', user_id)
            return False, f"Errore durante l'aggiornamento: {str(e)}"
