"""Modelli per il gruppo familiare e l'appartenenza degli utenti"""
from spese import db
from datetime import datetime


class Gruppo(db.Model):
    """Gruppo familiare che condivide le spese di tipo 'C'"""
    __tablename__ = 'groups_account'

    id = db.Column(db.Integer, primary_key=True)
    group_name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f'<Gruppo {self.group_name}>'


class UtenteGruppo(db.Model):
    """Profilo utente: anagrafica, gruppo di appartenenza e impostazioni"""
    __tablename__ = 'users_group'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, unique=True)
    first_name = db.Column(db.String(100), nullable=True)
    last_name = db.Column(db.String(100), nullable=True)
    group_id = db.Column(db.Integer, db.ForeignKey('groups_account.id'), nullable=True)

    # Impostazioni (NULL = valore di default, vedi spese.defaults)
    notifications_enabled = db.Column(db.Boolean, nullable=True)
    notification_time = db.Column(db.String(5), nullable=True)
    dark_mode = db.Column(db.Boolean, nullable=True)
    del_confirm = db.Column(db.Boolean, nullable=True)
    show_shared_expenses = db.Column(db.Boolean, nullable=True)
    show_personal_expenses = db.Column(db.Boolean, nullable=True)
    custom_period_active = db.Column(db.Boolean, nullable=True)
    custom_period_start_day = db.Column(db.Integer, nullable=True)

    gruppo = db.relationship('Gruppo', backref=db.backref('membri', lazy=True))

    @property
    def nome_completo(self):
        return ' '.join(p for p in (self.first_name, self.last_name) if p)

    def __repr__(self):
        return f'<UtenteGruppo {self.user_id} gruppo={self.group_id}>'
