"""Helper comuni alle view JSON."""
from datetime import date

from flask import jsonify, request, session

from spese.services.periodo_service import PeriodoService, period_label
from spese.services.utenti.utenti_service import UtentiService
from spese.utils import ValidationUtils


def get_user_id():
    """Utente autenticato della richiesta corrente"""
    return session.get('user_id')


def json_error(message, status=400):
    return jsonify({'success': False, 'message': message}), status


def get_scope():
    """Ambito richiesto ('C' condiviso, 'P' personale); ValueError se non valido"""
    scope = (request.args.get('scope') or 'C').upper()
    return ValidationUtils.validate_choice(scope, ('C', 'P'), 'scope')


def get_periodo(user_id):
    """Determina il periodo richiesto dalla query string.

    - `start` e `end` (YYYY-MM-DD): intervallo esplicito
    - `anno` e `mese` (1-12): periodo del mese scelto secondo le impostazioni
    - nessun parametro: periodo che contiene oggi

    Returns:
        dict con 'start', 'end' (ISO) e 'label'
    """
    if request.args.get('start') or request.args.get('end'):
        start = ValidationUtils.validate_date(request.args.get('start'))
        end = ValidationUtils.validate_date(request.args.get('end'))
        if start > end:
            raise ValueError("La data iniziale deve precedere la data finale")
        return {'start': start.isoformat(), 'end': end.isoformat(), 'label': None}

    periodo = PeriodoService(UtentiService().get_settings(user_id))
    anno = request.args.get('anno', type=int)
    mese = request.args.get('mese', type=int)
    if anno is not None or mese is not None:
        if anno is None or mese is None or not 1 <= mese <= 12:
            raise ValueError("Parametri anno e mese non validi")
        mese_index = mese - 1
        intervallo = periodo.mese(anno, mese_index)
    else:
        anno, mese_index = periodo.target_corrente()
        intervallo = periodo.mese(anno, mese_index)
    intervallo['label'] = period_label(anno, mese_index)
    return intervallo


def periodo_date(intervallo):
    """Converte gli estremi ISO del periodo in oggetti date"""
    return date.fromisoformat(intervallo['start']), date.fromisoformat(intervallo['end'])
