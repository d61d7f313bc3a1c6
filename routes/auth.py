# routes/auth.py
from flask import Blueprint, render_template, request, redirect, url_for, flash, session

from extensions import limiter
from helpers import log_in
from models.constants import ROLE_USER, ROLES
from services import portal
from services.errors import ServiceError

auth_bp = Blueprint('auth', __name__, url_prefix='')


def _landing(user):
    if user.is_admin:
        return url_for('admin.dashboard')
    return url_for('student.home')


def _safe_next(target):
    # only same-site relative paths
    if target and target.startswith('/') and not target.startswith('//'):
        return target
    return None


@auth_bp.route("/login", methods=["GET", "POST"])
@limiter.limit("10 per minute", methods=["POST"])
def login():
    if request.method == "POST":
        email = request.form.get("email", "")
        password = request.form.get("password", "")
        role = request.form.get("role", ROLE_USER)
        if role not in ROLES:
            role = ROLE_USER

        try:
            user = portal.login(email, password, role)
        except ServiceError as e:
            return render_template('login.html', error=e.message, role=role), 401

        log_in(user)
        flash(f"Welcome back, {user.username}.", "success")
        return redirect(_safe_next(request.args.get('next')) or _landing(user))
    if 'user_id' in session:
        return redirect(url_for('student.home'))
    return render_template('login.html', role=request.args.get('role', ROLE_USER))


@auth_bp.route("/logout")
def logout():
    session.clear()
    return redirect(url_for('student.home'))


@auth_bp.route("/register", methods=["GET", "POST"])
def register():
    if request.method == "POST":
        username = request.form.get("username", "")
        email = request.form.get("email", "")
        password = request.form.get("password", "")
        role = request.form.get("role", ROLE_USER)
        secret_key = request.form.get("secret_key") or None

        try:
            user = portal.register(username, email, password, role, secret_key)
        except ServiceError as e:
            return render_template("register.html", error=e.message, role=role), 400

        log_in(user)
        flash("Registration successful.", "success")
        return redirect(_landing(user))
    return render_template("register.html", role=request.args.get('role', ROLE_USER))
