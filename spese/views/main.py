"""Blueprint principale per le route di base"""
from flask import Blueprint, jsonify

main_bp = Blueprint('main', __name__)


@main_bp.route('/health')
def health():
    """Sonda di salute per deploy e monitoraggio"""
    return jsonify({'status': 'ok'})
