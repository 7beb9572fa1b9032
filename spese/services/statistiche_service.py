"""Service per le statistiche di periodo raggruppate per ambito"""
from datetime import date

from spese.defaults import AMBITO_DEFAULT
from spese.services.spese.spese_service import SpeseService, e_effettiva

# 'saldo' confronta entrate e uscite: ogni ambito ha il totale netto con segno
TIPI_ANALISI = ('spesa', 'entrata', 'saldo')


def raggruppa_per_ambito(spese, tipo='spesa'):
    """
    Totali per ambito di una lista di spese

    Con tipo 'saldo' le entrate sommano e le uscite sottraggono.

    Returns:
        Lista di dict {'ambito', 'totale', 'count'} ordinata per totale decrescente
    """
    stats = {}
    for s in spese:
        if tipo == 'saldo':
            valore = float(s.importo) if s.tipo_transazione == 'entrata' else -float(s.importo)
        elif s.tipo_transazione == tipo:
            valore = float(s.importo)
        else:
            continue
        ambito = s.ambito or AMBITO_DEFAULT
        voce = stats.setdefault(ambito, {'ambito': ambito, 'totale': 0.0, 'count': 0})
        voce['totale'] += valore
        voce['count'] += 1

    risultato = sorted(stats.values(), key=lambda v: (-v['totale'], v['ambito']))
    for voce in risultato:
        voce['totale'] = round(voce['totale'], 2)
    return risultato


class StatisticheService:
    """Statistiche sulle spese di un periodo"""

    def __init__(self, spese_service=None):
        self.spese_service = spese_service or SpeseService()

    def get_stats_by_ambito(self, user_id, start, end, tipo='spesa', scope='C'):
        """Totali per ambito di tutte le spese del periodo (previsione)"""
        return raggruppa_per_ambito(self.spese_service.get_spese(user_id, start, end, scope), tipo)

    def get_analisi(self, user_id, start, end, tipo='spesa', scope='C', today=None):
        """
        Analisi per ambito effettiva e prevista

        L'effettivo considera solo le spese confermate fino a oggi, la
        previsione tutte le spese del periodo.

        Returns:
            dict {'effettivo': {...}, 'previsto': {...}}, ciascuno con 'totale' e 'ambiti'
        """
        if tipo not in TIPI_ANALISI:
            raise ValueError(f"Tipo di analisi non valido: {tipo}")
        if today is None:
            today = date.today()

        spese = self.spese_service.get_spese(user_id, start, end, scope)
        effettive = [s for s in spese if e_effettiva(s, today)]

        def sezione(righe):
            ambiti = raggruppa_per_ambito(righe, tipo)
            return {'totale': round(sum(v['totale'] for v in ambiti), 2), 'ambiti': ambiti}

        return {'effettivo': sezione(effettive), 'previsto': sezione(spese)}
