# routes/api.py: JSON endpoints used by the chat, quiz, likes and to-do widgets
from flask import Blueprint, current_app, jsonify, request, session

from extensions import limiter
from helpers import login_required_api
from services import portal, quiz, retrieval
from services.ai import AIError, FAILED_REPLY, build_contents, decode_attachment, system_instruction
from services.errors import QuizParseError, ServiceError

api_bp = Blueprint('api', __name__, url_prefix='/api')


def _ai_client():
    if not current_app.config.get('AI_ENABLED'):
        return None
    return current_app.config.get('AI_CLIENT')


@api_bp.route("/ping", methods=["POST"])
def ping():
    current_app.logger.info(">> /api/ping received session_user=%s", session.get('user_id'))
    return jsonify({"ok": True, "session_user": session.get('user_id'), "session_exists": 'user_id' in session})


# -----------------------
# Chat assistant
# -----------------------
@api_bp.route("/chat", methods=["POST"])
@limiter.limit("20 per minute")
@login_required_api
def chat():
    current_app.logger.info(">> /api/chat hit by user=%s", session.get('user_id'))
    data = request.get_json(silent=True)
    current_app.logger.debug("Raw JSON payload keys: %r", list(data) if isinstance(data, dict) else data)
    if not data or not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400

    message = (data.get("message") or "").strip()
    attachment = data.get("attachment")
    if not message and not attachment:
        return jsonify({"error": "Please send a question or attach a file."}), 400

    attachment_part = None
    if attachment:
        try:
            attachment_part = decode_attachment(attachment)
        except ValueError as e:
            return jsonify({"error": str(e)}), 400

    client = _ai_client()
    if client is None:
        return jsonify({"answer": "AI is not configured. Please check GOOGLE_API_KEY."}), 503

    context = retrieval.build_context(message)
    contents = build_contents(
        data.get("history", []),
        message,
        attachment_part,
        limit=current_app.config['CHAT_HISTORY_LIMIT'],
    )
    try:
        answer = client.chat(contents, system=system_instruction(context))
    except AIError:
        return jsonify({"answer": FAILED_REPLY}), 502
    return jsonify({"answer": answer, "context_used": bool(context)}), 200


# -----------------------
# MCQ generator
# -----------------------
@api_bp.route("/mcq/generate", methods=["POST"])
@limiter.limit("20 per minute")
@login_required_api
def generate_mcqs():
    data = request.get_json(silent=True) or {}
    topic = (data.get("topic") or "").strip()
    if not topic:
        return jsonify({"error": "Please enter a topic"}), 400

    max_count = current_app.config['MAX_MCQ_COUNT']
    try:
        count = int(data.get("count", quiz.DEFAULT_COUNT))
    except (TypeError, ValueError):
        return jsonify({"error": "Question count must be a number"}), 400
    if count > max_count:
        return jsonify({"error": f"Maximum {max_count} MCQs allowed at once"}), 400
    if count < 1:
        return jsonify({"error": "Ask for at least one question"}), 400

    client = _ai_client()
    if client is None:
        return jsonify({"error": "AI is not configured. Please check GOOGLE_API_KEY."}), 503

    try:
        text = client.generate(quiz.build_prompt(topic, count))
        questions = quiz.parse_mcq_response(text)
    except QuizParseError as e:
        return jsonify({"error": e.message}), 502
    except AIError:
        return jsonify({"error": "Failed to generate MCQs. Please check your connection or try again later."}), 502

    current_app.logger.info("Generated %d MCQs on %r for user=%s", len(questions), topic, session.get('user_id'))
    token = quiz.sign_answer_key(current_app.secret_key, topic, questions)
    return jsonify({"topic": topic, "questions": questions, "token": token}), 200


@api_bp.route("/mcq/submit", methods=["POST"])
@login_required_api
def submit_mcqs():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400
    token = data.get("token")
    if not isinstance(token, str) or not token:
        return jsonify({"error": "Quiz token missing. Please generate a new quiz."}), 400
    answers = data.get("answers") or {}
    if not isinstance(answers, dict):
        return jsonify({"error": "Answers must map question numbers to options"}), 400

    # grade against the signed answer key, never against client-sent questions
    try:
        topic, answer_key = quiz.load_answer_key(current_app.secret_key, token)
    except ServiceError as e:
        return jsonify({"error": e.message}), 400

    score, correct = quiz.grade_answers(answer_key, answers)
    total = len(answer_key)
    percent = quiz.percentage(score, total)
    try:
        result = portal.add_mcq_result(
            session['user_id'], data.get("subject") or "General", topic, score, total, percent,
        )
    except ServiceError as e:
        return jsonify({"error": e.message}), 400

    return jsonify({
        "score": score,
        "total_questions": total,
        "percentage": percent,
        "correct": correct,
        "result": result.to_dict(),
    }), 201


# -----------------------
# Blog likes
# -----------------------
@api_bp.route("/blogs/<int:blog_id>/like", methods=["GET"])
@login_required_api
def like_state(blog_id):
    blog = portal.get_blog(blog_id)
    if blog is None:
        return jsonify({"error": "Blog not found."}), 404
    return jsonify({"liked": portal.has_user_liked(blog_id, session['user_id']), "count": blog.likes or 0})


@api_bp.route("/blogs/<int:blog_id>/like", methods=["POST"])
@login_required_api
def toggle_like(blog_id):
    if portal.get_blog(blog_id) is None:
        return jsonify({"error": "Blog not found."}), 404
    try:
        liked, count = portal.toggle_blog_like(blog_id, session['user_id'])
    except ServiceError as e:
        return jsonify({"error": e.message}), 400
    return jsonify({"liked": liked, "count": count})


# -----------------------
# To-dos
# -----------------------
@api_bp.route("/todos/<int:todo_id>/toggle", methods=["POST"])
@login_required_api
def toggle_todo(todo_id):
    try:
        todo = portal.toggle_todo(todo_id, session['user_id'])
    except ServiceError as e:
        return jsonify({"error": e.message}), 404
    return jsonify(todo.to_dict())
