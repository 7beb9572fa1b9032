"""
Service per la gestione delle spese (uscite ed entrate).
Fornisce le operazioni CRUD, la generazione delle ricorrenze e il riepilogo
di periodo.
"""
import logging
from datetime import date
from typing import List, Tuple, Optional

from flask import current_app, has_app_context

from spese import db
from spese.models.spesa import Spesa
from spese.services import BaseService
from spese.services.spese.ricorrenze_service import (
    LIMITE_ANNI, RegolaRicorrenza, build_occurrences, normalize_start_date, template_confirmed
)
from spese.services.utenti.gruppi_service import GruppiService
from spese.utils import SecurityUtils, ValidationUtils

logger = logging.getLogger(__name__)

TIPI_TRANSAZIONE = ('spesa', 'entrata')
TIPI_SPESA = ('C', 'P')  # Condivisa, Personale

# Campi che possono essere modificati su una spesa esistente
CAMPI_MODIFICABILI = (
    'importo', 'ambito', 'negozio', 'note_spese', 'data_spesa', 'tipo_transazione', 'confermata',
)

# Campi che possono essere svuotati inviando null
CAMPI_ANNULLABILI = ('negozio', 'note_spese')

# Campi che non vengono propagati alle occorrenze successive di una serie
CAMPI_NON_PROPAGATI = ('data_spesa', 'confermata')


def e_effettiva(spesa, today):
    """True se la spesa è confermata e già avvenuta"""
    return bool(spesa.confermata) and spesa.data_spesa <= today


def _valida_campo(campo, valore):
    if campo == 'importo':
        return ValidationUtils.validate_amount(valore)
    if campo == 'ambito':
        return SecurityUtils.sanitize_string(ValidationUtils.validate_required_field(valore, 'ambito'), 100)
    if campo == 'negozio':
        return SecurityUtils.sanitize_string(valore, 200)
    if campo == 'note_spese':
        return SecurityUtils.sanitize_string(valore, 1000) or None
    if campo == 'data_spesa':
        return ValidationUtils.validate_date(valore)
    if campo == 'tipo_transazione':
        return ValidationUtils.validate_choice(valore, TIPI_TRANSAZIONE, 'tipo_transazione')
    if campo == 'tipo_spesa':
        return ValidationUtils.validate_choice(valore, TIPI_SPESA, 'tipo_spesa')
    if campo == 'confermata':
        if not isinstance(valore, bool):
            raise ValueError("Il campo confermata deve essere vero o falso")
        return valore
    raise ValueError(f"Campo sconosciuto: {campo}")


class SpeseService(BaseService):
    """Service per gestire le spese condivise e personali"""

    def __init__(self):
        super().__init__()
        self.gruppi = GruppiService()

    def _limite_anni(self):
        if has_app_context():
            return int(current_app.config.get('RECURRING_LIMIT_YEARS', LIMITE_ANNI))
        return LIMITE_ANNI

    def _query_scope(self, user_id, scope):
        """Query delle spese attive visibili all'utente nell'ambito indicato.

        None se lo scope è condiviso e l'utente non appartiene a un gruppo.
        """
        query = Spesa.query.filter(Spesa.deleted_at.is_(None), Spesa.tipo_spesa == scope)
        if scope == 'C':
            group_id = self.gruppi.get_group_id(user_id)
            if not group_id:
                return None
            return query.filter(Spesa.group_id == group_id)
        return query.filter(Spesa.user_id == user_id)

    def get_spese(self, user_id: str, start: date = None, end: date = None, scope: str = 'C') -> List[Spesa]:
        """
        Recupera le spese attive del periodo (estremi inclusi)

        Args:
            user_id: ID dell'utente
            start: data iniziale (opzionale)
            end: data finale (opzionale)
            scope: 'C' per le spese del gruppo, 'P' per quelle personali

        Returns:
            Lista di Spesa dalla più recente
        """
        query = self._query_scope(user_id, scope)
        if query is None:
            return []
        if start is not None:
            query = query.filter(Spesa.data_spesa >= start)
        if end is not None:
            query = query.filter(Spesa.data_spesa <= end)
        return query.order_by(Spesa.data_spesa.desc(), Spesa.created_at.desc(), Spesa.id.desc()).all()

    def get_ricorrenti(self, user_id: str, scope: str = 'C') -> List[Spesa]:
        """Recupera i template delle spese ricorrenti, dal più recente"""
        query = self._query_scope(user_id, scope)
        if query is None:
            return []
        return query.filter(Spesa.is_recurring_parent.is_(True)).order_by(
            Spesa.created_at.desc(), Spesa.id.desc()
        ).all()

    def get_occorrenze(self, template_id: int) -> List[Spesa]:
        """Occorrenze attive generate da un template, in ordine di data"""
        return Spesa.query.filter(
            Spesa.recurring_parent_id == template_id,
            Spesa.deleted_at.is_(None)
        ).order_by(Spesa.data_spesa.asc()).all()

    def get_by_id(self, spesa_id: int, user_id: str) -> Optional[Spesa]:
        """Recupera una spesa attiva visibile all'utente"""
        spesa = db.session.get(Spesa, spesa_id)
        if spesa is None or spesa.deleted_at is not None:
            return None
        if spesa.tipo_spesa == 'P':
            return spesa if spesa.user_id == user_id else None
        group_id = self.gruppi.get_group_id(user_id)
        return spesa if group_id and spesa.group_id == group_id else None

    def _valori_distinti(self, colonna, user_id, scope):
        query = self._query_scope(user_id, scope)
        if query is None:
            return []
        rows = query.with_entities(colonna).distinct().order_by(colonna).all()
        return [r[0] for r in rows if r[0]]

    def get_ambiti(self, user_id: str, scope: str = 'C') -> List[str]:
        """Ambiti (categorie) già usati, in ordine alfabetico"""
        return self._valori_distinti(Spesa.ambito, user_id, scope)

    def get_negozi(self, user_id: str, scope: str = 'C') -> List[str]:
        """Negozi già usati, in ordine alfabetico"""
        return self._valori_distinti(Spesa.negozio, user_id, scope)

    def create(self, user_id: str, data: dict) -> Tuple[bool, str, Optional[Spesa]]:
        """
        Crea una nuova spesa; se porta una `recurring_config` diventa il template
        di una ricorrenza e vengono generate tutte le occorrenze future.

        Args:
            user_id: ID dell'utente che crea la spesa
            data: dict con importo, ambito, negozio, note_spese, data_spesa,
                tipo_transazione, tipo_spesa, confermata, ricorrente, recurring_config

        Returns:
            Tuple (success: bool, message: str, spesa: Spesa)
        """
        if not isinstance(data, dict):
            return False, "Dati non validi", None

        try:
            valori = {
                'importo': _valida_campo('importo', data.get('importo')),
                'ambito': _valida_campo('ambito', data.get('ambito')),
                'negozio': _valida_campo('negozio', data.get('negozio')),
                'note_spese': _valida_campo('note_spese', data.get('note_spese')),
                'data_spesa': _valida_campo('data_spesa', data.get('data_spesa')),
                'tipo_transazione': _valida_campo('tipo_transazione', data.get('tipo_transazione') or 'spesa'),
                'tipo_spesa': _valida_campo('tipo_spesa', data.get('tipo_spesa') or 'C'),
                'confermata': _valida_campo('confermata', True if data.get('confermata') is None else data['confermata']),
            }
            regola = None
            if data.get('recurring_config'):
                regola = RegolaRicorrenza.from_dict(data['recurring_config'], data_inizio=valori['data_spesa'])
            elif data.get('is_recurring_parent'):
                raise ValueError("Configurazione della ricorrenza mancante")
        except ValueError as e:
            return False, str(e), None

        group_id = None
        if valori['tipo_spesa'] == 'C':
            group_id = self.gruppi.get_group_id(user_id)
            if not group_id:
                return False, "Gruppo non trovato", None

        if regola is not None:
            # La data del template deve cadere in uno dei giorni selezionati
            data_template = normalize_start_date(valori['data_spesa'], regola)
            regola = regola.con_data_inizio(data_template)
            valori['data_spesa'] = data_template
            valori['confermata'] = template_confirmed(valori['confermata'], regola)

        spesa = Spesa(
            user_id=user_id,
            group_id=group_id,
            ricorrente=regola is not None or bool(data.get('ricorrente')),
            is_recurring_parent=regola is not None,
            recurring_config=regola.to_dict() if regola is not None else None,
            **valori
        )
        success, message = self.save(spesa)
        if not success:
            return False, f"Errore durante la creazione: {message}", None

        if regola is None:
            return True, "Spesa creata con successo", spesa

        return self._genera_occorrenze(spesa, regola)

    def _genera_occorrenze(self, template: Spesa, regola: RegolaRicorrenza) -> Tuple[bool, str, Spesa]:
        """Inserisce in blocco le occorrenze del template appena salvato.

        Se l'inserimento fallisce il template resta salvato: l'errore viene
        registrato e segnalato nel messaggio.
        """
        _, occorrenze = build_occurrences(template.to_dict(), regola, self._limite_anni())
        if not occorrenze:
            return True, "Spesa ricorrente creata (nessuna occorrenza futura)", template

        try:
            self.db.session.add_all([Spesa(**o) for o in occorrenze])
            self.db.session.commit()
        except Exception:
            self.db.session.rollback()
            logger.warning('Generazione occorrenze fallita per il template %s', template.id, exc_info=True)
            return True, "Spesa ricorrente creata, ma errore nella generazione delle occorrenze", template

        logger.info('Generate %d occorrenze per il template %s', len(occorrenze), template.id)
        return True, f"Spesa ricorrente creata con {len(occorrenze)} occorrenze future", template

    def update(self, spesa_id: int, user_id: str, data: dict,
               update_future: bool = False) -> Tuple[bool, str, int]:
        """
        Aggiorna una spesa; con `update_future` le stesse modifiche (esclusi data
        e stato di conferma) vengono applicate alle occorrenze successive della serie

        Returns:
            Tuple (success: bool, message: str, occorrenze aggiornate: int)
        """
        spesa = self.get_by_id(spesa_id, user_id)
        if spesa is None:
            return False, "Spesa non trovata", 0
        if not isinstance(data, dict):
            return False, "Dati non validi", 0

        try:
            valori = {
                campo: _valida_campo(campo, data[campo])
                for campo in CAMPI_MODIFICABILI
                if data.get(campo) is not None or (campo in CAMPI_ANNULLABILI and campo in data)
            }
        except ValueError as e:
            return False, str(e), 0

        if not valori:
            return False, "Nessun campo da aggiornare", 0

        try:
            for campo, valore in valori.items():
                setattr(spesa, campo, valore)

            if spesa.is_recurring_parent and 'data_spesa' in valori:
                # La regola parte sempre dalla data del template
                regola = RegolaRicorrenza.from_dict(spesa.recurring_config, data_inizio=spesa.data_spesa)
                spesa.recurring_config = regola.to_dict()

            aggiornate = 0
            template_id = spesa.recurring_parent_id or (spesa.id if spesa.is_recurring_parent else None)
            campi_serie = {k: v for k, v in valori.items() if k not in CAMPI_NON_PROPAGATI}
            if update_future and template_id and campi_serie:
                successive = Spesa.query.filter(
                    Spesa.recurring_parent_id == template_id,
                    Spesa.deleted_at.is_(None),
                    Spesa.data_spesa >= spesa.data_spesa,
                    Spesa.id != spesa.id
                ).all()
                for occorrenza in successive:
                    for campo, valore in campi_serie.items():
                        setattr(occorrenza, campo, valore)
                    aggiornate += 1

            self.db.session.commit()
        except Exception as e:
            self.db.session.rollback()
            logger.exception('Errore nell\'aggiornamento della spesa %s', spesa_id)
            return False, f"Errore durante l'aggiornamento: {str(e)}", 0

        if aggiornate:
            return True, f"Spesa aggiornata insieme a {aggiornate} occorrenze successive", aggiornate
        return True, "Spesa aggiornata con successo", 0

    def delete(self, spesa_id: int, user_id: str) -> Tuple[bool, str]:
        """Elimina (soft delete) una spesa"""
        spesa = self.get_by_id(spesa_id, user_id)
        if spesa is None:
            return False, "Spesa non trovata"
        success, message = self.soft_delete(spesa)
        if not success:
            return False, f"Errore durante l'eliminazione: {message}"
        return True, "Spesa eliminata con successo"

    def confirm(self, spesa_id: int, user_id: str) -> Tuple[bool, str]:
        """Conferma una spesa (da prevista a effettiva)"""
        spesa = self.get_by_id(spesa_id, user_id)
        if spesa is None:
            return False, "Spesa non trovata"
        success, message = super().update(spesa, confermata=True)
        if not success:
            return False, f"Errore durante la conferma: {message}"
        return True, "Spesa confermata"

    def get_riepilogo(self, user_id: str, start: date, end: date, scope: str = 'C',
                      today: date = None) -> dict:
        """
        Riepilogo del periodo: totali effettivi e previsti

        Sono effettive le spese confermate con data fino a oggi compreso; le
        altre (non confermate o future) sono in attesa e contano solo nei previsti.
        """
        if today is None:
            today = date.today()
        spese = self.get_spese(user_id, start, end, scope)
        confermate = [s for s in spese if e_effettiva(s, today)]
        in_attesa = [s for s in spese if not e_effettiva(s, today)]

        def totale(righe, tipo):
            return round(sum(s.importo for s in righe if s.tipo_transazione == tipo), 2)

        entrate_confermate = totale(confermate, 'entrata')
        uscite_confermate = totale(confermate, 'spesa')
        entrate_in_attesa = totale(in_attesa, 'entrata')
        uscite_in_attesa = totale(in_attesa, 'spesa')
        entrate_previste = round(entrate_confermate + entrate_in_attesa, 2)
        uscite_previste = round(uscite_confermate + uscite_in_attesa, 2)

        return {
            'entrate_confermate': entrate_confermate,
            'uscite_confermate': uscite_confermate,
            'saldo_confermato': round(entrate_confermate - uscite_confermate, 2),
            'entrate_in_attesa': entrate_in_attesa,
            'uscite_in_attesa': uscite_in_attesa,
            'entrate_previste': entrate_previste,
            'uscite_previste': uscite_previste,
            'saldo_previsto': round(entrate_previste - uscite_previste, 2),
            'num_confermate': len(confermate),
            'num_in_attesa': len(in_attesa),
        }
