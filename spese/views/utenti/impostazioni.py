"""Blueprint per profilo e impostazioni dell'utente."""
from flask import Blueprint, jsonify, request

from spese.services.utenti.utenti_service import UtentiService
from spese.views import get_periodo, get_user_id, json_error

impostazioni_bp = Blueprint('impostazioni', __name__)
service = UtentiService()


@impostazioni_bp.route('/', methods=['GET'])
def leggi():
    settings = service.get_settings(get_user_id())
    return jsonify({'success': True, 'impostazioni': settings.to_dict()})


@impostazioni_bp.route('/', methods=['PUT'])
def aggiorna():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return json_error('Dati non validi')

    user_id = get_user_id()
    success, message = service.update_settings(user_id, data)
    if not success:
        return json_error(message)
    return jsonify({
        'success': True,
        'message': message,
        'impostazioni': service.get_settings(user_id).to_dict()
    })


@impostazioni_bp.route('/periodo', methods=['GET'])
def periodo():
    """Estremi del periodo corrente o del mese richiesto (`anno`, `mese`)"""
    try:
        intervallo = get_periodo(get_user_id())
    except ValueError as e:
        return json_error(str(e))
    return jsonify({'success': True, 'periodo': intervallo})


@impostazioni_bp.route('/profilo', methods=['GET'])
def profilo():
    return jsonify({'success': True, 'profilo': service.get_profile(get_user_id())})


@impostazioni_bp.route('/profilo', methods=['PUT'])
def aggiorna_profilo():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return json_error('Dati non validi')

    user_id = get_user_id()
    success, message = service.update_profile(user_id, data.get('first_name'), data.get('last_name'))
    if not success:
        return json_error(message, 500)
    return jsonify({'success': True, 'message': message, 'profilo': service.get_profile(user_id)})
