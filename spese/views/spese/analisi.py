"""Blueprint per l'analisi delle spese per ambito."""
from flask import Blueprint, jsonify, request

from spese.services.statistiche_service import TIPI_ANALISI, StatisticheService
from spese.utils import ValidationUtils
from spese.utils.formatting import format_currency
from spese.views import get_periodo, get_scope, get_user_id, json_error, periodo_date

analisi_bp = Blueprint('analisi', __name__)
service = StatisticheService()


def _formatta(sezione):
    sezione['totale_formattato'] = format_currency(sezione['totale'])
    for voce in sezione['ambiti']:
        voce['totale_formattato'] = format_currency(voce['totale'])
    return sezione


@analisi_bp.route('/ambiti', methods=['GET'])
def per_ambito():
    """Totali per ambito nel periodo, effettivi e previsti"""
    user_id = get_user_id()
    try:
        scope = get_scope()
        tipo = ValidationUtils.validate_choice(request.args.get('tipo') or 'spesa', TIPI_ANALISI, 'tipo')
        periodo = get_periodo(user_id)
    except ValueError as e:
        return json_error(str(e))

    start, end = periodo_date(periodo)
    analisi = service.get_analisi(user_id, start, end, tipo, scope)
    return jsonify({
        'success': True,
        'periodo': periodo,
        'tipo': tipo,
        'effettivo': _formatta(analisi['effettivo']),
        'previsto': _formatta(analisi['previsto'])
    })
