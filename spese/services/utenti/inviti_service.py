"""
Service per gli inviti ai gruppi familiari.

Un invito è identificato da un codice di 8 caratteri (lettere maiuscole e
cifre, esclusi i caratteri ambigui 0/O e 1/I). Il codice viene mostrato
all'utente come `XXXX-XXXX` e accettato con o senza trattino.
"""
import logging
import secrets
from datetime import datetime, timedelta

from flask import current_app, has_app_context

from spese import db
from spese.models.gruppo import UtenteGruppo
from spese.models.invito import Invito
from spese.services.utenti.gruppi_service import GruppiService
from spese.utils import SecurityUtils
from spese.utils.formatting import format_invite_code, unformat_invite_code

logger = logging.getLogger(__name__)

ALFABETO_CODICE = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
LUNGHEZZA_CODICE = 8


class InvitiService:
    """Service per creare, validare, accettare e annullare inviti"""

    format_invite_code = staticmethod(format_invite_code)
    unformat_invite_code = staticmethod(unformat_invite_code)

    def __init__(self):
        self.gruppi = GruppiService()

    def _genera_codice(self):
        while True:
            codice = ''.join(secrets.choice(ALFABETO_CODICE) for _ in range(LUNGHEZZA_CODICE))
            if not Invito.query.filter_by(invite_code=codice).first():
                return codice

    def _scadenza_default(self):
        if has_app_context():
            return int(current_app.config.get('INVITE_EXPIRES_DAYS', 7))
        return 7

    def _get_pending(self, invite_code):
        """Restituisce (invito, errore): l'invito se ancora utilizzabile"""
        codice = unformat_invite_code(invite_code)
        invito = Invito.query.filter_by(invite_code=codice).first() if codice else None
        if invito is None:
            return None, 'Codice invito non valido'
        if invito.status == 'accepted':
            return None, 'Invito già utilizzato'
        if invito.status == 'cancelled':
            return None, 'Invito annullato'
        if invito.e_scaduto():
            return None, 'Invito scaduto'
        return invito, None

    def create_invite(self, group_id: int, invited_by: str, invited_email: str = None,
                      expires_in_days: int = None) -> dict:
        """Crea un nuovo invito per il gruppo"""
        if expires_in_days is None:
            expires_in_days = self._scadenza_default()
        try:
            expires_in_days = int(expires_in_days)
        except (TypeError, ValueError):
            return {'success': False, 'error': 'Durata dell\'invito non valida'}
        if expires_in_days < 1:
            return {'success': False, 'error': 'Durata dell\'invito non valida'}

        if not group_id or self.gruppi.get_group(group_id) is None:
            return {'success': False, 'error': 'Gruppo non trovato'}
        if not self.gruppi.is_member(invited_by, group_id):
            return {'success': False, 'error': 'Solo i membri del gruppo possono invitare'}

        try:
            invito = Invito(
                group_id=group_id,
                invite_code=self._genera_codice(),
                invited_by=invited_by,
                invited_email=SecurityUtils.sanitize_string(invited_email, 200) or None,
                status='pending',
                expires_at=datetime.utcnow() + timedelta(days=expires_in_days),
            )
            db.session.add(invito)
            db.session.commit()
            logger.info('Creato invito %s per gruppo %s', invito.invite_code, group_id)
            return {
                'success': True,
                'invite_code': invito.invite_code,
                'invite_id': invito.id,
                'expires_at': invito.expires_at.isoformat(),
            }
        except Exception as e:
            db.session.rollback()
            logger.exception('Errore nella creazione dell\'invito per gruppo %s', group_id)
            return {'success': False, 'error': f"Errore nella creazione dell'invito: {str(e)}"}

    def validate_invite(self, invite_code: str) -> dict:
        """Valida un codice invito"""
        invito, errore = self._get_pending(invite_code)
        if invito is None:
            return {'success': True, 'valid': False, 'error': errore}

        invitante = UtenteGruppo.query.filter_by(user_id=invito.invited_by).first()
        return {
            'success': True,
            'valid': True,
            'group_id': invito.group_id,
            'group_name': invito.gruppo.group_name if invito.gruppo else None,
            'invited_by_name': invitante.nome_completo if invitante else None,
            'invited_email': invito.invited_email,
            'expires_at': invito.expires_at.isoformat(),
        }

    def accept_invite(self, invite_code: str, user_id: str, first_name: str,
                      last_name: str = None) -> dict:
        """Accetta un invito e aggiunge l'utente al gruppo"""
        if not user_id:
            return {'success': False, 'error': 'Utente non valido'}
        first_name = SecurityUtils.sanitize_string(first_name, 100)
        if not first_name:
            return {'success': False, 'error': 'Il nome è obbligatorio'}

        invito, errore = self._get_pending(invite_code)
        if invito is None:
            return {'success': False, 'error': errore}

        try:
            utente = UtenteGruppo.query.filter_by(user_id=user_id).first()
            if utente and utente.group_id == invito.group_id:
                return {'success': False, 'error': 'Sei già membro di questo gruppo'}
            if utente is None:
                utente = UtenteGruppo(user_id=user_id)
                db.session.add(utente)
            utente.first_name = first_name
            if last_name is not None:
                utente.last_name = SecurityUtils.sanitize_string(last_name, 100) or None
            utente.group_id = invito.group_id

            invito.status = 'accepted'
            invito.accepted_at = datetime.utcnow()
            invito.accepted_by = user_id
            db.session.commit()

            nome_gruppo = invito.gruppo.group_name if invito.gruppo else ''
            logger.info('Utente %s entrato nel gruppo %s con invito %s', user_id, invito.group_id, invito.invite_code)
            return {
                'success': True,
                'group_id': invito.group_id,
                'message': f"Benvenuto nel gruppo {nome_gruppo}".strip(),
            }
        except Exception as e:
            db.session.rollback()
            logger.exception('Errore nell\'accettazione dell\'invito %s', invite_code)
            return {'success': False, 'error': f"Errore nell'accettare l'invito: {str(e)}"}

    def cancel_invite(self, invite_code: str, user_id: str) -> dict:
        """Annulla un invito ancora in attesa; solo chi l'ha creato può farlo"""
        invito, errore = self._get_pending(invite_code)
        if invito is None:
            return {'success': False, 'error': errore}
        if invito.invited_by != user_id:
            return {'success': False, 'error': 'Non puoi annullare questo invito'}

        try:
            invito.status = 'cancelled'
            db.session.commit()
            return {'success': True, 'message': 'Invito annullato'}
        except Exception as e:
            db.session.rollback()
            logger.exception('Errore nella cancellazione dell\'invito %s', invite_code)
            return {'success': False, 'error': f"Errore nella cancellazione dell'invito: {str(e)}"}

    def get_active_invites(self, group_id: int) -> dict:
        """Inviti del gruppo in attesa e non scaduti, dal più recente"""
        try:
            inviti = Invito.query.filter(
                Invito.group_id == group_id,
                Invito.status == 'pending',
                Invito.expires_at > datetime.utcnow()
            ).order_by(Invito.created_at.desc(), Invito.id.desc()).all()
            return {'success': True, 'invites': [i.to_dict() for i in inviti]}
        except Exception as e:
            logger.exception('Errore nel recupero degli inviti del gruppo %s', group_id)
            return {'success': False, 'invites': [], 'error': f"Errore nel recupero degli inviti attivi: {str(e)}"}
