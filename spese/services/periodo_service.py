"""
Calcolo dei confini del periodo di riferimento.

Un periodo è il mese solare oppure, se l'utente ha attivato il periodo
personalizzato, un "mese finanziario" che va dal giorno di inizio del mese
precedente al giorno prima nel mese di riferimento (es. inizio 20: il periodo
di Febbraio va dal 20/01 al 19/02). Il mese di riferimento è quello in cui
il periodo termina.

Gli indici dei mesi vanno da 0 (Gennaio) a 11 (Dicembre); le date restituite
sono stringhe ISO (YYYY-MM-DD) senza ora né fuso orario.
"""
import calendar
from datetime import date

from spese.defaults import MESI_ITALIANI


def date_with_clamped_day(year, month_index, day):
    """Crea una data nel mese indicato limitando il giorno all'ultimo del mese.

    Evita lo scivolamento nel mese successivo (es. 30 Febbraio -> 2 Marzo):
    `date_with_clamped_day(2025, 1, 30)` restituisce il 28/02/2025.
    Indici fuori da 0..11 (es. -1) si spostano sull'anno adiacente.
    """
    anno = year + month_index // 12
    mese = month_index % 12 + 1
    ultimo_giorno = calendar.monthrange(anno, mese)[1]
    return date(anno, mese, min(day, ultimo_giorno))


def compute_range(year, month_index, start_day=1, is_active=False):
    """Calcola le date di inizio e fine (incluse) del periodo che termina nel mese indicato.

    Args:
        year: anno di riferimento
        month_index: mese di riferimento (0-11) in cui termina il periodo
        start_day: giorno del mese in cui inizia il periodo personalizzato (1-31)
        is_active: se False si usa sempre il mese solare

    Returns:
        dict con chiavi 'start' ed 'end' in formato ISO
    """
    if not is_active or start_day == 1:
        start = date_with_clamped_day(year, month_index, 1)
        end = date_with_clamped_day(year, month_index, 31)
    else:
        start = date_with_clamped_day(year, month_index - 1, start_day)
        end = date_with_clamped_day(year, month_index, start_day - 1)

    return {
        'start': start.isoformat(),
        'end': end.isoformat()
    }


def resolve_target_period(today, start_day):
    """Determina il mese di riferimento del periodo che contiene `today`.

    Se oggi è il giorno di inizio o successivo, il periodo corrente termina
    nel mese successivo (Dicembre -> Gennaio dell'anno dopo).

    Returns:
        tuple (anno, indice mese 0-11)
    """
    if today.day >= start_day:
        if today.month == 12:
            return today.year + 1, 0
        return today.year, today.month
    return today.year, today.month - 1


def current_range(impostazioni, today=None):
    """Periodo che contiene `today` secondo le impostazioni dell'utente"""
    if today is None:
        today = date.today()
    if impostazioni.periodo_personalizzato:
        start_day = int(impostazioni.custom_period_start_day)
        anno, mese_index = resolve_target_period(today, start_day)
        return compute_range(anno, mese_index, start_day, True)
    return compute_range(today.year, today.month - 1)


def range_for_month(impostazioni, year, month_index):
    """Periodo di un mese scelto dall'utente (nessuna risoluzione su oggi)"""
    return compute_range(
        year,
        month_index,
        int(impostazioni.custom_period_start_day or 1),
        bool(impostazioni.custom_period_active)
    )


def period_label(year, month_index):
    """Nome del periodo per le intestazioni, es. 'Febbraio 2026'"""
    anno = year + month_index // 12
    return f"{MESI_ITALIANI[month_index % 12]} {anno}"


class PeriodoService:
    """Servizio per il calcolo dei periodi legato alle impostazioni di un utente"""

    def __init__(self, impostazioni):
        self.impostazioni = impostazioni

    def corrente(self, today=None):
        return current_range(self.impostazioni, today)

    def mese(self, year, month_index):
        return range_for_month(self.impostazioni, year, month_index)

    def target_corrente(self, today=None):
        """(anno, indice mese) del periodo che contiene oggi"""
        if today is None:
            today = date.today()
        if self.impostazioni.periodo_personalizzato:
            return resolve_target_period(today, int(self.impostazioni.custom_period_start_day))
        return today.year, today.month - 1
