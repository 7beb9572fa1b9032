"""Blueprint per la gestione delle spese e delle spese ricorrenti."""
import logging

from flask import Blueprint, Response, jsonify, request

from spese.services.spese.export_service import export_to_xlsx
from spese.services.spese.spese_service import SpeseService
from spese.views import get_periodo, get_scope, get_user_id, json_error, periodo_date

logger = logging.getLogger(__name__)

spese_bp = Blueprint('spese', __name__)
service = SpeseService()


@spese_bp.route('/', methods=['GET'])
def lista():
    """Spese del periodo richiesto (default: periodo corrente)"""
    user_id = get_user_id()
    try:
        scope = get_scope()
        periodo = get_periodo(user_id)
    except ValueError as e:
        return json_error(str(e))

    start, end = periodo_date(periodo)
    spese = service.get_spese(user_id, start, end, scope)
    return jsonify({
        'success': True,
        'periodo': periodo,
        'spese': [s.to_dict() for s in spese]
    })


@spese_bp.route('/', methods=['POST'])
def aggiungi():
    """Crea una spesa (eventualmente ricorrente)"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return json_error('Dati non validi')

    success, message, spesa = service.create(get_user_id(), data)
    if not success:
        return json_error(message)

    occorrenze = service.get_occorrenze(spesa.id) if spesa.is_recurring_parent else []
    return jsonify({
        'success': True,
        'message': message,
        'spesa': spesa.to_dict(),
        'occorrenze_generate': len(occorrenze)
    }), 201


@spese_bp.route('/<int:spesa_id>', methods=['GET'])
def dettaglio(spesa_id):
    """Restituisce i dati di una spesa in formato JSON"""
    spesa = service.get_by_id(spesa_id, get_user_id())
    if spesa is None:
        return json_error('Spesa non trovata', 404)
    return jsonify({'success': True, 'spesa': spesa.to_dict()})


@spese_bp.route('/<int:spesa_id>', methods=['PUT'])
def modifica(spesa_id):
    """Modifica una spesa; `update_future` propaga alle occorrenze successive"""
    user_id = get_user_id()
    if service.get_by_id(spesa_id, user_id) is None:
        return json_error('Spesa non trovata', 404)

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return json_error('Dati non validi')

    update_future = bool(data.pop('update_future', False))
    success, message, aggiornate = service.update(spesa_id, user_id, data, update_future=update_future)
    if not success:
        return json_error(message)
    return jsonify({
        'success': True,
        'message': message,
        'occorrenze_aggiornate': aggiornate,
        'spesa': service.get_by_id(spesa_id, user_id).to_dict()
    })


@spese_bp.route('/<int:spesa_id>', methods=['DELETE'])
def elimina(spesa_id):
    """Elimina (soft delete) una spesa"""
    success, message = service.delete(spesa_id, get_user_id())
    if not success:
        return json_error(message, 404 if message == 'Spesa non trovata' else 500)
    return jsonify({'success': True, 'message': message})


@spese_bp.route('/<int:spesa_id>/conferma', methods=['POST'])
def conferma(spesa_id):
    """Conferma una spesa prevista"""
    success, message = service.confirm(spesa_id, get_user_id())
    if not success:
        return json_error(message, 404 if message == 'Spesa non trovata' else 500)
    return jsonify({'success': True, 'message': message})


@spese_bp.route('/ricorrenti', methods=['GET'])
def ricorrenti():
    """Template delle spese ricorrenti"""
    try:
        scope = get_scope()
    except ValueError as e:
        return json_error(str(e))
    templates = service.get_ricorrenti(get_user_id(), scope)
    return jsonify({'success': True, 'ricorrenti': [t.to_dict() for t in templates]})


@spese_bp.route('/ambiti', methods=['GET'])
def ambiti():
    try:
        scope = get_scope()
    except ValueError as e:
        return json_error(str(e))
    return jsonify({'success': True, 'ambiti': service.get_ambiti(get_user_id(), scope)})


@spese_bp.route('/negozi', methods=['GET'])
def negozi():
    try:
        scope = get_scope()
    except ValueError as e:
        return json_error(str(e))
    return jsonify({'success': True, 'negozi': service.get_negozi(get_user_id(), scope)})


@spese_bp.route('/riepilogo', methods=['GET'])
def riepilogo():
    """Saldi effettivi e previsti del periodo"""
    user_id = get_user_id()
    try:
        scope = get_scope()
        periodo = get_periodo(user_id)
    except ValueError as e:
        return json_error(str(e))

    start, end = periodo_date(periodo)
    return jsonify({
        'success': True,
        'periodo': periodo,
        'riepilogo': service.get_riepilogo(user_id, start, end, scope)
    })


@spese_bp.route('/export.xlsx', methods=['GET'])
def export_xlsx():
    """Esporta le spese del periodo in formato Excel"""
    user_id = get_user_id()
    try:
        scope = get_scope()
        periodo = get_periodo(user_id)
    except ValueError as e:
        return json_error(str(e))

    start, end = periodo_date(periodo)
    spese = sorted(service.get_spese(user_id, start, end, scope), key=lambda s: (s.data_spesa, s.id))
    try:
        contenuto = export_to_xlsx(spese, titolo=periodo.get('label') or 'Spese')
    except Exception:
        logger.exception('Errore nell\'esportazione xlsx')
        return json_error('Errore nell\'esportazione', 500)

    nome_file = f"spese_{periodo['start']}_{periodo['end']}.xlsx"
    return Response(
        contenuto,
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        headers={'Content-Disposition': f'attachment; filename={nome_file}'}
    )
