# models/todo.py
from datetime import datetime

from extensions import db


class Todo(db.Model):
    __tablename__ = "todos"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    text = db.Column(db.String(500), nullable=False)
    is_completed = db.Column(db.Boolean, nullable=False, default=False)
    tag = db.Column(db.String(20), nullable=False, default="Study")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "text": self.text,
            "is_completed": self.is_completed,
            "tag": self.tag,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
