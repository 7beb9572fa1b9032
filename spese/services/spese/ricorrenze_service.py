"""
Espansione delle spese ricorrenti nelle singole occorrenze datate.

Il template (la spesa con `is_recurring_parent`) è già la prima occorrenza:
le date generate sono sempre successive alla sua data. Per evitare
generazioni illimitate, la finestra è limitata a `LIMITE_ANNI` anni dalla data
di inizio anche quando la ricorrenza non ha data di fine.

Le funzioni di questo modulo sono pure: nessun accesso al database.
"""
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

# Passo di ciascuna cadenza. I passi in mesi/anni usano relativedelta, che
# limita il giorno alla fine del mese (31/01 + 1 mese = 28/02).
FREQUENZE = {
    'giornaliera': relativedelta(days=1),
    'settimanale': relativedelta(weeks=1),
    'mensile': relativedelta(months=1),
    'bimestrale': relativedelta(months=2),
    'trimestrale': relativedelta(months=3),
    'semestrale': relativedelta(months=6),
    'annuale': relativedelta(years=1),
}

TIPI_CONFERMA = ('A', 'M')  # Automatica, Manuale

LIMITE_ANNI = 10

# Campi del template copiati su ogni occorrenza
CAMPI_COPIATI = (
    'user_id', 'group_id', 'importo', 'ambito', 'negozio', 'note_spese',
    'tipo_spesa', 'tipo_transazione',
)


def _parse_data(valore, campo):
    if valore is None or isinstance(valore, date):
        return valore
    try:
        return date.fromisoformat(str(valore))
    except ValueError:
        raise ValueError(f"Formato data non valido per {campo} (YYYY-MM-DD)")


class RegolaRicorrenza:
    """Configurazione di una ricorrenza, salvata in `recurring_config` del template.

    I giorni della settimana (ISO, 1=Lunedì .. 7=Domenica) hanno senso solo per
    la cadenza 'settimanale' e vengono scartati per le altre cadenze.
    """

    def __init__(self, ricorrenza, data_inizio, data_fine=None, tipo_conferma='A', giorni_settimana=None):
        if ricorrenza not in FREQUENZE:
            raise ValueError(f"Ricorrenza non valida: {ricorrenza}")
        if tipo_conferma not in TIPI_CONFERMA:
            raise ValueError(f"Tipo conferma non valido: {tipo_conferma}")

        giorni = []
        if ricorrenza == 'settimanale' and giorni_settimana:
            for g in giorni_settimana:
                if isinstance(g, bool) or not isinstance(g, int) or not 1 <= g <= 7:
                    raise ValueError(f"Giorno della settimana non valido: {g}")
            giorni = sorted(set(giorni_settimana))

        self.ricorrenza = ricorrenza
        self.data_inizio = _parse_data(data_inizio, 'data_inizio')
        self.data_fine = _parse_data(data_fine, 'data_fine')
        self.tipo_conferma = tipo_conferma
        self.giorni_settimana = giorni

    @classmethod
    def from_dict(cls, data, data_inizio=None):
        """Costruisce la regola da un dict `recurring_config`.

        `data_inizio`, se fornita, prevale su quella del dict: la data di inizio
        di una regola coincide sempre con la data del template.
        """
        if not isinstance(data, dict):
            raise ValueError("Configurazione ricorrenza non valida")
        inizio = data_inizio if data_inizio is not None else data.get('data_inizio')
        if inizio is None:
            raise ValueError("Data di inizio della ricorrenza mancante")
        return cls(
            ricorrenza=data.get('ricorrenza'),
            data_inizio=inizio,
            data_fine=data.get('data_fine') or None,
            tipo_conferma=data.get('tipo_conferma') or 'A',
            giorni_settimana=data.get('giorni_settimana') or None,
        )

    @property
    def usa_giorni_settimana(self):
        return self.ricorrenza == 'settimanale' and bool(self.giorni_settimana)

    @property
    def conferma_automatica(self):
        return self.tipo_conferma == 'A'

    def con_data_inizio(self, nuova_data):
        """Restituisce una copia della regola con una nuova data di inizio"""
        return RegolaRicorrenza(
            self.ricorrenza, nuova_data, self.data_fine,
            self.tipo_conferma, list(self.giorni_settimana)
        )

    def to_dict(self):
        data = {
            'ricorrenza': self.ricorrenza,
            'data_inizio': self.data_inizio.isoformat(),
            'data_fine': self.data_fine.isoformat() if self.data_fine else None,
            'tipo_conferma': self.tipo_conferma,
        }
        if self.ricorrenza == 'settimanale':
            data['giorni_settimana'] = list(self.giorni_settimana)
        return data

    def __repr__(self):
        return f"<RegolaRicorrenza {self.ricorrenza} dal {self.data_inizio} al {self.data_fine}>"


def normalize_start_date(data_inizio, regola):
    """Sposta la data di inizio sul primo giorno della settimana selezionato.

    Vale solo per le ricorrenze settimanali con giorni espliciti; negli altri
    casi la data resta invariata.
    """
    if not regola.usa_giorni_settimana:
        return data_inizio
    giorno = data_inizio
    for _ in range(7):
        if giorno.isoweekday() in regola.giorni_settimana:
            return giorno
        giorno += timedelta(days=1)
    return data_inizio


def get_end_bound(data_inizio, regola, limite_anni=LIMITE_ANNI):
    """Ultima data generabile: la data di fine, ma mai oltre `limite_anni` dall'inizio"""
    limite = data_inizio + relativedelta(years=limite_anni)
    if regola.data_fine is not None and regola.data_fine < limite:
        return regola.data_fine
    return limite


def expand(data_inizio, regola, limite_anni=LIMITE_ANNI):
    """Genera in ordine le date delle occorrenze successive a `data_inizio`.

    Ogni chiamata restituisce un nuovo generatore. Se la prima data utile
    supera il limite (es. data di fine precedente all'inizio) non viene
    generato nulla.
    """
    fine = get_end_bound(data_inizio, regola, limite_anni)

    if regola.usa_giorni_settimana:
        giorno = data_inizio + timedelta(days=1)
        while giorno <= fine:
            if giorno.isoweekday() in regola.giorni_settimana:
                yield giorno
            giorno += timedelta(days=1)
        return

    # Ogni occorrenza è calcolata dalla data di inizio (inizio + n passi):
    # una ricorrenza del 31 torna al 31 dopo un mese corto.
    passo = FREQUENZE[regola.ricorrenza]
    n = 1
    while True:
        prossima = data_inizio + passo * n
        if prossima > fine:
            return
        yield prossima
        n += 1


def template_confirmed(confermata, regola):
    """Con conferma manuale anche il template nasce da confermare"""
    if regola.tipo_conferma == 'M':
        return False
    return confermata


def build_occurrences(template, regola, limite_anni=LIMITE_ANNI):
    """Prepara i record delle occorrenze da inserire insieme al template.

    Args:
        template: dict con i campi della spesa (almeno 'data_spesa'; 'id' se già salvato)
        regola: RegolaRicorrenza del template

    Returns:
        tuple (data del template eventualmente spostata, lista di dict occorrenza)
    """
    data_template = normalize_start_date(_parse_data(template['data_spesa'], 'data_spesa'), regola)
    confermata = regola.conferma_automatica

    occorrenze = []
    for giorno in expand(data_template, regola, limite_anni):
        occorrenza = {campo: template.get(campo) for campo in CAMPI_COPIATI}
        occorrenza.update({
            'data_spesa': giorno,
            'is_recurring_parent': False,
            'recurring_parent_id': template.get('id'),
            'recurring_config': None,
            'ricorrente': True,
            'confermata': confermata,
        })
        occorrenze.append(occorrenza)

    return data_template, occorrenze
