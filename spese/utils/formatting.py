from flask import current_app, has_app_context


def format_currency(value, fmt=None):
    """Formatta un valore numerico usando il formato definito in `FORMATO_VALUTA`."""
    if fmt is None:
        fmt = current_app.config.get('FORMATO_VALUTA', '€ {:.2f}') if has_app_context() else '€ {:.2f}'

    # normalize value
    try:
        val = 0.0 if value is None else float(value)
    except (TypeError, ValueError):
        val = 0.0

    return fmt.format(val)


def format_invite_code(code):
    """Formatta il codice invito per la visualizzazione (A3K9P2X7 -> A3K9-P2X7)"""
    if not code or len(code) != 8:
        return code
    return f"{code[:4]}-{code[4:]}"


def unformat_invite_code(code):
    """Rimuove la formattazione dal codice invito (a3k9-p2x7 -> A3K9P2X7)"""
    if not code:
        return ''
    return ''.join(ch for ch in code if ch not in '- \t').upper()
