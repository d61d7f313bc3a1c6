# models/mcq_result.py
from datetime import datetime

from extensions import db


class McqResult(db.Model):
    __tablename__ = "mcq_results"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    subject = db.Column(db.String(64), nullable=False, default="General")
    topic = db.Column(db.String(255), nullable=False)
    score = db.Column(db.Integer, nullable=False)
    total_questions = db.Column(db.Integer, nullable=False)
    percentage = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "subject": self.subject,
            "topic": self.topic,
            "score": self.score,
            "total_questions": self.total_questions,
            "percentage": self.percentage,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
