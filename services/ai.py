# services/ai.py
import base64
import logging

import google.generativeai as genai

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

ALLOWED_ATTACHMENT_TYPES = {"application/pdf", "image/jpeg", "image/png", "image/webp"}

EMPTY_REPLY = "I processed the request but found no conclusive data."
FAILED_REPLY = "The assistant timed out. Please try a shorter query or a smaller file."

SYSTEM_TEMPLATE = """You are the Prime Students Assistant, a professional AKU-EB academic advisor.

ARCHIVE KNOWLEDGE:
{context}

RULES:
1. FORMATTING: Use LaTeX for ALL mathematical formulas. Inline math must be in $...$, block math in $$...$$.
2. LINKS: When providing links, use standard Markdown [Title](URL).
3. TONE: Scholarly, encouraging, and precise.
4. DOCUMENT ANALYSIS: If an image or PDF is attached, extract its data and prioritize it in your answer.
5. MEMORY: You are in a continuous session; refer back to previous points if needed."""


class AIError(Exception):
    pass


def system_instruction(context):
    return SYSTEM_TEMPLATE.format(context=context or "(no matching archive entries)")


def decode_attachment(attachment):
    """Validate an uploaded attachment dict and return a Gemini inline_data part."""
    mime_type = (attachment or {}).get("mime_type")
    if mime_type not in ALLOWED_ATTACHMENT_TYPES:
        raise ValueError("Please upload PDF or image files (JPEG, PNG, WEBP) for analysis.")
    try:
        data = base64.b64decode(attachment.get("data") or "", validate=True)
    except (ValueError, TypeError) as exc:
        raise ValueError("Attachment is not valid base64 data.") from exc
    if not data:
        raise ValueError("Attachment is empty.")
    return {"inline_data": {"mime_type": mime_type, "data": data}}


def build_contents(history, message, attachment_part=None, limit=10):
    """Assemble the Gemini ``contents`` list from prior turns and the new message."""
    contents = []
    recent = history[-limit:] if isinstance(history, list) and limit else []
    for turn in recent:
        if not isinstance(turn, dict):
            continue
        text = (turn.get("text") or turn.get("content") or "").strip()
        if not text:
            continue
        role = "model" if turn.get("role") in ("model", "assistant") else "user"
        contents.append({"role": role, "parts": [{"text": text}]})

    parts = []
    if message:
        parts.append({"text": message})
    if attachment_part is not None:
        parts.append(attachment_part)
    contents.append({"role": "user", "parts": parts})
    return contents


def _response_text(response):
    try:
        return (response.text or "").strip()
    except (ValueError, AttributeError):
        # .text raises ValueError when the candidate was blocked or empty
        return ""


class GeminiClient:
    """Thin wrapper around google.generativeai used by the chat and quiz endpoints."""

    def __init__(self, api_key, model_name=DEFAULT_MODEL):
        genai.configure(api_key=api_key)
        self.model_name = model_name

    def _model(self, system=None):
        if system:
            return genai.GenerativeModel(self.model_name, system_instruction=system)
        return genai.GenerativeModel(self.model_name)

    def chat(self, contents, system=None, temperature=0.7):
        try:
            response = self._model(system).generate_content(
                contents, generation_config={"temperature": temperature},
            )
        except Exception as exc:
            logger.exception("Gemini chat call failed")
            raise AIError(str(exc)) from exc
        text = _response_text(response)
        logger.info("AI answered (len=%d)", len(text))
        return text or EMPTY_REPLY

    def generate(self, prompt):
        try:
            response = self._model().generate_content(prompt)
        except Exception as exc:
            logger.exception("Gemini generation call failed")
            raise AIError(str(exc)) from exc
        return _response_text(response)


def init_ai(app):
    """Create the Gemini client when a key is configured; mirrors AI state into config."""
    api_key = app.config.get("GOOGLE_API_KEY")
    app.logger.info("GOOGLE_API_KEY from env (first 8 chars): %s",
                    (api_key[:8] + "...") if api_key else None)
    client = None
    if api_key:
        try:
            client = GeminiClient(api_key, app.config.get("GEMINI_MODEL") or DEFAULT_MODEL)
            app.logger.info("AI model initialized: %s", client.model_name)
        except Exception as e:
            app.logger.warning("Could not initialize google.generativeai: %s", e)
            client = None
    else:
        app.logger.info("No GOOGLE_API_KEY; AI disabled.")
    app.config["AI_ENABLED"] = client is not None
    app.config["AI_CLIENT"] = client
    return client
