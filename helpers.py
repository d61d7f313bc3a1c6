# helpers.py
import os
import uuid
from functools import wraps

from flask import current_app, flash, jsonify, redirect, request, session, url_for
from werkzeug.utils import secure_filename

from models.constants import ROLE_ADMIN
from services import portal

ALLOWED_EXT = {"pdf", "txt", "png", "jpg", "jpeg", "docx"}


def current_user():
    return portal.get_user(session.get("user_id"))


def log_in(user):
    session.clear()
    session["user_id"] = user.id
    session["user_role"] = user.role
    session["user_name"] = user.username


def login_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        if "user_id" not in session:
            flash("Please sign in to continue.", "info")
            return redirect(url_for("auth.login", next=request.path))
        return f(*args, **kwargs)
    return decorated


def login_required_api(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"error": "authentication required"}), 401
        return f(*args, **kwargs)
    return decorated


def admin_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        if "user_id" not in session:
            return redirect(url_for("auth.login", next=request.path))
        if session.get("user_role") != ROLE_ADMIN:
            flash("Access denied. Faculty access required.", "error")
            return redirect(url_for("student.home"))
        return f(*args, **kwargs)
    return decorated


def allowed_file(filename):
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXT


def save_upload(file_storage):
    """Store an uploaded file under UPLOAD_FOLDER; returns (url, filename) or None."""
    if file_storage is None or not file_storage.filename:
        return None
    if not allowed_file(file_storage.filename):
        raise ValueError(f"File type not allowed: {file_storage.filename}")
    filename = secure_filename(file_storage.filename)
    # unique on disk so same-named uploads never replace each other
    stored_name = f"{uuid.uuid4().hex}_{filename}"
    folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(folder, exist_ok=True)
    file_storage.save(os.path.join(folder, stored_name))
    current_app.logger.info("Stored upload %s as %s", filename, stored_name)
    return url_for("student.uploaded_file", filename=stored_name), filename
