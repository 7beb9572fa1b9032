"""
Utilità comuni per l'applicazione
"""
import math
from datetime import date, datetime


class FormatterUtils:
    """Utilità per la formattazione"""

    @staticmethod
    def format_date(date_obj, format_string="%d/%m/%Y"):
        """Formatta una data"""
        if date_obj is None:
            return ''
        if isinstance(date_obj, str):
            date_obj = date.fromisoformat(date_obj)
        return date_obj.strftime(format_string)


class ValidationUtils:
    """Utilità per la validazione"""

    @staticmethod
    def validate_amount(value):
        """Valida e converte un importo (accetta anche la virgola decimale)"""
        if isinstance(value, bool):
            raise ValueError("Importo non valido")
        try:
            if isinstance(value, str):
                value = value.strip().replace(',', '.')
            amount = round(float(value), 2)
        except (TypeError, ValueError):
            raise ValueError("Importo non valido")
        if not math.isfinite(amount):
            raise ValueError("Importo non valido")
        if amount <= 0:
            raise ValueError("L'importo deve essere maggiore di zero")
        return amount

    @staticmethod
    def validate_date(value):
        """Valida e converte una data"""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            return datetime.strptime(str(value), '%Y-%m-%d').date()
        except (TypeError, ValueError):
            raise ValueError("Formato data non valido (YYYY-MM-DD)")

    @staticmethod
    def validate_required_field(value, field_name):
        """Valida che un campo obbligatorio non sia vuoto"""
        if value is None or not str(value).strip():
            raise ValueError(f"Il campo {field_name} è obbligatorio")
        return str(value).strip()

    @staticmethod
    def validate_choice(value, choices, field_name):
        """Valida che il valore sia tra quelli ammessi"""
        if value not in choices:
            ammessi = ', '.join(f"'{c}'" for c in choices)
            raise ValueError(f"Il campo {field_name} deve essere uno tra {ammessi}")
        return value

    @staticmethod
    def validate_day_of_month(value, field_name='giorno'):
        """Valida un giorno del mese (1-31)"""
        try:
            giorno = int(value)
        except (TypeError, ValueError):
            raise ValueError(f"Il campo {field_name} deve essere un numero")
        if giorno < 1 or giorno > 31:
            raise ValueError(f"Il campo {field_name} deve essere tra 1 e 31")
        return giorno


class SecurityUtils:
    """Utilità per la sicurezza"""

    @staticmethod
    def sanitize_string(input_str, max_length=None):
        """Sanitizza una stringa di input"""
        if not input_str:
            return ""

        sanitized = str(input_str).strip()

        # Tronca se necessario
        if max_length and len(sanitized) > max_length:
            sanitized = sanitized[:max_length]

        return sanitized
