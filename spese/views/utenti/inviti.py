"""Blueprint per gli inviti al gruppo familiare."""
from flask import Blueprint, jsonify, request

from spese.services.utenti.gruppi_service import GruppiService
from spese.services.utenti.inviti_service import InvitiService
from spese.views import get_user_id, json_error

inviti_bp = Blueprint('inviti', __name__)
service = InvitiService()
gruppi = GruppiService()


def _risposta(result, status_ok=200):
    if result.get('success'):
        return jsonify(result), status_ok
    return jsonify(result), 400


@inviti_bp.route('/', methods=['GET'])
def attivi():
    """Inviti del gruppo ancora in attesa"""
    group_id = gruppi.get_group_id(get_user_id())
    if not group_id:
        return json_error('Gruppo non trovato', 404)
    result = service.get_active_invites(group_id)
    for invito in result.get('invites', []):
        invito['invite_code_formattato'] = service.format_invite_code(invito['invite_code'])
    return _risposta(result)


@inviti_bp.route('/', methods=['POST'])
def crea():
    """Crea un invito per il gruppo dell'utente"""
    user_id = get_user_id()
    group_id = gruppi.get_group_id(user_id)
    if not group_id:
        return json_error('Gruppo non trovato', 404)

    data = request.get_json(silent=True) or {}
    result = service.create_invite(
        group_id,
        user_id,
        invited_email=data.get('invited_email'),
        expires_in_days=data.get('expires_in_days')
    )
    if result.get('success'):
        result['invite_code_formattato'] = service.format_invite_code(result['invite_code'])
    return _risposta(result, 201)


@inviti_bp.route('/<code>', methods=['GET'])
def valida(code):
    return _risposta(service.validate_invite(code))


@inviti_bp.route('/<code>/accetta', methods=['POST'])
def accetta(code):
    data = request.get_json(silent=True) or {}
    result = service.accept_invite(code, get_user_id(), data.get('first_name'), data.get('last_name'))
    return _risposta(result)


@inviti_bp.route('/<code>/annulla', methods=['POST'])
def annulla(code):
    return _risposta(service.cancel_invite(code, get_user_id()))
