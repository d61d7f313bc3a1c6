# models/material.py
from datetime import datetime

from extensions import db
from models.constants import NOTE, PAST_PAPER


class MaterialMixin:
    """Columns shared by the four per-grade, per-type material tables.

    The grade and type of a row are implied by the table it lives in, so they
    are class attributes rather than columns.
    """

    grade = None
    material_type = None

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    subject = db.Column(db.String(64), nullable=False, index=True)
    file_url = db.Column(db.String(1024), nullable=True)
    file_name = db.Column(db.String(255), nullable=True)
    year = db.Column(db.String(4), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    @property
    def type(self):
        return self.material_type

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description or "",
            "grade": self.grade,
            "subject": self.subject,
            "type": self.material_type,
            "fileUrl": self.file_url,
            "fileName": self.file_name,
            "year": self.year,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.id} {self.title!r}>"


class Grade9PastPaper(MaterialMixin, db.Model):
    __tablename__ = "grade9_pastpapers"
    grade = "Grade 9"
    material_type = PAST_PAPER


class Grade9Note(MaterialMixin, db.Model):
    __tablename__ = "grade9_notes"
    grade = "Grade 9"
    material_type = NOTE


class Grade10PastPaper(MaterialMixin, db.Model):
    __tablename__ = "grade10_pastpapers"
    grade = "Grade 10"
    material_type = PAST_PAPER


class Grade10Note(MaterialMixin, db.Model):
    __tablename__ = "grade10_notes"
    grade = "Grade 10"
    material_type = NOTE


# fetch order used wherever all materials are combined
MATERIAL_MODELS = (Grade9PastPaper, Grade9Note, Grade10PastPaper, Grade10Note)

_BY_KEY = {(m.grade, m.material_type): m for m in MATERIAL_MODELS}


def material_model(grade, material_type):
    try:
        return _BY_KEY[(grade, material_type)]
    except KeyError:
        raise ValueError(f"No material table for {grade} / {material_type}") from None
