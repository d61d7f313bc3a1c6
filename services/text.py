# services/text.py
import re

from markupsafe import Markup, escape

ALL = "All"

_PUNCT_RE = re.compile(r"[^\w\s-]")
_SPACE_RE = re.compile(r"[\s_]+")
_HYPHENS_RE = re.compile(r"-{2,}")


def slugify(title):
    slug = _PUNCT_RE.sub("", (title or "").lower())
    slug = _SPACE_RE.sub("-", slug.strip())
    slug = _HYPHENS_RE.sub("-", slug)
    return slug.strip("-")


def highlight_match(text, query):
    """Escape ``text`` and wrap case-insensitive matches of ``query`` in <mark>."""
    if not text:
        return Markup("")
    if not query:
        return escape(text)
    pattern = re.compile(f"({re.escape(query)})", re.IGNORECASE)
    pieces = []
    for part in pattern.split(text):
        if part and part.lower() == query.lower():
            pieces.append(Markup("<mark>%s</mark>") % part)
        else:
            pieces.append(escape(part))
    return Markup("").join(pieces)


def filter_materials(materials, subject=ALL, query=""):
    """Grade-browser filter over one grade/type listing."""
    q = (query or "").lower()

    def keep(m):
        if subject and subject != ALL and m.subject != subject:
            return False
        if not q:
            return True
        return (
            q in (m.title or "").lower()
            or q in (m.year or "")
            or q in (m.description or "").lower()
            or q in (m.subject or "").lower()
        )

    return [m for m in materials if keep(m)]


def build_repository(materials, blogs):
    """Flatten materials and blogs into the rows of the admin repository view."""
    rows = []
    for m in materials:
        rows.append({
            "category": "Material",
            "id": m.id,
            "title": m.title,
            "author": None,
            "year": m.year,
            "grade": m.grade,
            "type": m.material_type,
            "subject": m.subject,
            "obj": m,
        })
    for b in blogs:
        rows.append({
            "category": "Blog",
            "id": b.id,
            "title": b.title,
            "author": b.author,
            "year": None,
            "grade": ALL,
            "type": "Insight",
            "subject": "Scholarly",
            "obj": b,
        })
    return rows


def filter_repository(rows, query="", type_filter=ALL, grade=ALL, subject=ALL):
    q = (query or "").lower()

    def matches_search(row):
        if not q:
            return True
        return (
            q in row["title"].lower()
            or (row["author"] is not None and q in row["author"].lower())
            or (row["year"] is not None and q in row["year"])
            or (row["subject"] is not None and q in row["subject"].lower())
        )

    def matches_type(row):
        if type_filter == ALL:
            return True
        if type_filter == "Blog":
            return row["category"] == "Blog"
        return row["type"] == type_filter

    return [
        row for row in rows
        if matches_search(row)
        and matches_type(row)
        and (grade == ALL or row["grade"] == grade)
        and (subject == ALL or row["subject"] == subject)
    ]
