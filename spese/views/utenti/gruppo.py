"""Blueprint per la registrazione del gruppo familiare."""
from flask import Blueprint, jsonify, request

from spese.services.utenti.gruppi_service import GruppiService
from spese.views import get_user_id, json_error

gruppo_bp = Blueprint('gruppo', __name__)
service = GruppiService()


@gruppo_bp.route('/', methods=['POST'])
def registra():
    """Crea un nuovo gruppo e vi associa l'utente corrente"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return json_error('Dati non validi')

    result = service.register_user_with_group(
        get_user_id(),
        data.get('group_name'),
        data.get('first_name'),
        data.get('last_name')
    )
    if not result.get('success'):
        return jsonify(result), 400
    return jsonify(result), 201
