"""
Default data values separated from operational configuration.

Questo modulo contiene valori di 'contenuto' usati dall'app (impostazioni
utente predefinite, nomi dei mesi) che non dovrebbero essere miscelati con
le impostazioni operative del runtime (DB, SECRET_KEY, flags, ecc.).
"""

# Impostazioni utente usate quando la riga `users_group` manca o ha valori NULL
IMPOSTAZIONI_DEFAULT = {
    'notifications_enabled': True,
    'notification_time': '19:30',
    'dark_mode': False,
    'del_confirm': True,
    'show_shared_expenses': True,
    'show_personal_expenses': True,
    'custom_period_active': False,
    'custom_period_start_day': 1,
}

MESI_ITALIANI = [
    'Gennaio', 'Febbraio', 'Marzo', 'Aprile', 'Maggio', 'Giugno',
    'Luglio', 'Agosto', 'Settembre', 'Ottobre', 'Novembre', 'Dicembre'
]

# Ambito usato nelle statistiche quando una spesa non ne ha uno
AMBITO_DEFAULT = 'Altro'
