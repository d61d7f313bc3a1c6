# services/retrieval.py
"""Keyword-overlap retrieval of catalog items for the chat assistant.

Every material and blog is scored by how many query keywords occur in its
title, description and content. The best few are rendered into a text block
that is embedded in the assistant's system instruction.
"""
import logging

from services import portal

logger = logging.getLogger(__name__)

MIN_KEYWORD_LENGTH = 4
CONTEXT_LIMIT = 5
DETAIL_PREVIEW = 150


def extract_keywords(query):
    return [word for word in (query or "").lower().split(" ") if len(word) >= MIN_KEYWORD_LENGTH]


def _searchable_text(item):
    parts = (
        getattr(item, "title", "") or "",
        getattr(item, "description", "") or "",
        getattr(item, "content", "") or "",
    )
    return " ".join(parts).lower()


def score_item(item, keywords):
    text = _searchable_text(item)
    return sum(1 for kw in keywords if kw in text)


def rank_items(items, keywords, limit=CONTEXT_LIMIT):
    scored = [(item, score_item(item, keywords)) for item in items]
    scored = [pair for pair in scored if pair[1] > 0]
    # sorted() is stable, so equal scores keep their fetch order
    scored = sorted(scored, key=lambda pair: pair[1], reverse=True)
    return [item for item, _ in scored[:limit]]


def _describe(item):
    title = getattr(item, "title", "")
    kind = getattr(item, "material_type", None) or "Insight"
    subject = getattr(item, "subject", None) or "Academic"
    details = getattr(item, "description", None) or (getattr(item, "content", None) or "")[:DETAIL_PREVIEW]
    return f"[RESOURCE: {title}] Type: {kind}, Subject: {subject}. Details: {details}..."


def format_context(items):
    return "\n\n".join(_describe(item) for item in items)


def build_context(query):
    keywords = extract_keywords(query)
    if not keywords:
        return ""
    items = portal.get_all_materials() + portal.get_blogs()
    ranked = rank_items(items, keywords)
    logger.debug("Retrieval for %r: %d keywords, %d of %d items kept",
                 query, len(keywords), len(ranked), len(items))
    return format_context(ranked)
