"""
Impostazioni dell'utente come valore esplicito.

Non è un modello SQLAlchemy: le colonne vivono su `users_group`; questa
classe viene passata a chi ha bisogno delle impostazioni (es. il calcolo del
periodo) invece di leggerle da uno stato globale.
"""
from spese.defaults import IMPOSTAZIONI_DEFAULT


class ImpostazioniUtente:
    """Impostazioni utente con i default applicati ai valori mancanti"""

    CAMPI = tuple(IMPOSTAZIONI_DEFAULT.keys())

    def __init__(self, **valori):
        for campo in self.CAMPI:
            valore = valori.get(campo)
            setattr(self, campo, IMPOSTAZIONI_DEFAULT[campo] if valore is None else valore)

    @classmethod
    def from_row(cls, row):
        """Costruisce le impostazioni da una riga `UtenteGruppo` (o None)"""
        if row is None:
            return cls()
        return cls(**{campo: getattr(row, campo, None) for campo in cls.CAMPI})

    @property
    def periodo_personalizzato(self):
        """True se il mese finanziario non coincide con il mese solare"""
        return bool(self.custom_period_active) and int(self.custom_period_start_day or 1) != 1

    def to_dict(self):
        return {campo: getattr(self, campo) for campo in self.CAMPI}

    def __eq__(self, other):
        if not isinstance(other, ImpostazioniUtente):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f'<ImpostazioniUtente periodo={self.custom_period_active}/{self.custom_period_start_day}>'
