"""Modello per le spese (uscite ed entrate, condivise o personali)"""
from spese import db
from datetime import datetime


class Spesa(db.Model):
    """Una transazione: singola, template di una ricorrenza oppure occorrenza generata.

    - singola: `is_recurring_parent` False e `recurring_parent_id` NULL
    - template: `is_recurring_parent` True, porta la `recurring_config` ed è
      essa stessa la prima occorrenza
    - occorrenza: `recurring_parent_id` punta al template, nessuna config
    """
    __tablename__ = 'spese'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    group_id = db.Column(db.Integer, db.ForeignKey('groups_account.id'), nullable=True, index=True)
    importo = db.Column(db.Float, nullable=False)
    ambito = db.Column(db.String(100), nullable=False)
    negozio = db.Column(db.String(200), nullable=True)
    note_spese = db.Column(db.Text, nullable=True)
    data_spesa = db.Column(db.Date, nullable=False, index=True)
    tipo_spesa = db.Column(db.String(1), nullable=False, default='C')  # 'C' condivisa, 'P' personale
    tipo_transazione = db.Column(db.String(20), nullable=False, default='spesa')  # 'spesa' o 'entrata'
    ricorrente = db.Column(db.Boolean, nullable=False, default=False)
    confermata = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    deleted_at = db.Column(db.DateTime, nullable=True)  # NULL = attiva

    is_recurring_parent = db.Column(db.Boolean, nullable=False, default=False)
    recurring_parent_id = db.Column(db.Integer, db.ForeignKey('spese.id'), nullable=True, index=True)
    recurring_config = db.Column(db.JSON(none_as_null=True), nullable=True)

    @property
    def e_attiva(self):
        return self.deleted_at is None

    @property
    def e_template(self):
        return bool(self.is_recurring_parent)

    @property
    def e_occorrenza(self):
        return self.recurring_parent_id is not None

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'group_id': self.group_id,
            'importo': self.importo,
            'ambito': self.ambito,
            'negozio': self.negozio,
            'note_spese': self.note_spese,
            'data_spesa': self.data_spesa.isoformat() if self.data_spesa else None,
            'tipo_spesa': self.tipo_spesa,
            'tipo_transazione': self.tipo_transazione,
            'ricorrente': bool(self.ricorrente),
            'confermata': bool(self.confermata),
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'deleted_at': self.deleted_at.isoformat() if self.deleted_at else None,
            'is_recurring_parent': bool(self.is_recurring_parent),
            'recurring_parent_id': self.recurring_parent_id,
            'recurring_config': self.recurring_config,
        }

    def __repr__(self):
        return f'<Spesa {self.data_spesa} {self.ambito}: {self.importo} ({self.tipo_transazione})>'
