"""Modello per gli inviti a un gruppo familiare"""
from spese import db
from datetime import datetime


class Invito(db.Model):
    __tablename__ = 'invites'

    id = db.Column(db.Integer, primary_key=True)
    group_id = db.Column(db.Integer, db.ForeignKey('groups_account.id'), nullable=False, index=True)
    invite_code = db.Column(db.String(8), nullable=False, unique=True)
    invited_by = db.Column(db.String(64), nullable=False)
    invited_email = db.Column(db.String(200), nullable=True)
    status = db.Column(db.String(20), nullable=False, default='pending')  # pending, accepted, cancelled
    expires_at = db.Column(db.DateTime, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    accepted_at = db.Column(db.DateTime, nullable=True)
    accepted_by = db.Column(db.String(64), nullable=True)

    gruppo = db.relationship('Gruppo', backref=db.backref('inviti', lazy=True))

    def e_scaduto(self, now=None):
        return self.expires_at <= (now or datetime.utcnow())

    def to_dict(self):
        return {
            'id': self.id,
            'invite_code': self.invite_code,
            'invited_email': self.invited_email,
            'status': self.status,
            'expires_at': self.expires_at.isoformat() if self.expires_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'accepted_at': self.accepted_at.isoformat() if self.accepted_at else None,
            'invited_by': self.invited_by,
            'accepted_by': self.accepted_by,
        }

    def __repr__(self):
        return f'<Invito {self.invite_code} ({self.status})>'
