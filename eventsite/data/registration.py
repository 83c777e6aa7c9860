from eventsite import db
from datetime import datetime


class Registration(db.Model):
    """A single sign-up for an event. Repeat sign-ups by the same person are allowed."""
    __tablename__ = 'registrations'

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(64), nullable=False)
    comment = db.Column(db.Text, nullable=False, default='')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    event = db.relationship('Event', back_populates='registrations')

    def __repr__(self):
        return f'<Registration {self.name} -> {self.event_id}>'
