# routes/student.py
from flask import (
    Blueprint, abort, current_app, flash, redirect, render_template, request,
    send_from_directory, session, url_for,
)

from helpers import current_user, login_required
from models.constants import GRADE_SLUGS, MATERIAL_TYPES, PAST_PAPER, SUBJECTS, TODO_TAGS
from services import portal, stats
from services.errors import ServiceError
from services.text import ALL, filter_materials, slugify

student_bp = Blueprint('student', __name__)

HOME_BLOG_COUNT = 3


@student_bp.app_template_global()
def blog_url(blog):
    # titles made only of punctuation have no slug
    return url_for('student.blog_detail', blog_id=blog.id, slug=slugify(blog.title) or None)


@student_bp.route('/')
def home():
    blogs = portal.get_blogs()
    return render_template('student/home.html', blogs=blogs[:HOME_BLOG_COUNT])


# /grade-9 and /grade-10
@student_bp.route('/<any("grade-9", "grade-10"):grade_slug>')
def grade_browser(grade_slug):
    grade = GRADE_SLUGS[grade_slug]
    material_type = request.args.get('type', PAST_PAPER)
    if material_type not in MATERIAL_TYPES:
        material_type = PAST_PAPER
    subject = request.args.get('subject', ALL)
    query = request.args.get('q', '').strip()

    materials = portal.get_materials(grade, material_type)
    return render_template(
        'student/grade.html',
        grade=grade,
        grade_slug=grade_slug,
        material_type=material_type,
        subject=subject,
        query=query,
        subjects=SUBJECTS,
        material_types=MATERIAL_TYPES,
        materials=filter_materials(materials, subject, query),
    )


@student_bp.route('/blogs')
def blogs():
    return render_template('student/blogs.html', blogs=portal.get_blogs())


@student_bp.route('/blogs/<int:blog_id>')
@student_bp.route('/blogs/<int:blog_id>/<slug>')
def blog_detail(blog_id, slug=None):
    blog = portal.get_blog(blog_id)
    if blog is None:
        abort(404)
    if slug is not None and slug != slugify(blog.title):
        return redirect(blog_url(blog), code=301)

    user_id = session.get('user_id')
    liked = portal.has_user_liked(blog.id, user_id) if user_id else False
    return render_template(
        'student/blog_detail.html',
        blog=blog,
        comments=portal.get_comments(blog.id),
        liked=liked,
    )


@student_bp.route('/blogs/<int:blog_id>/comments', methods=['POST'])
@login_required
def add_comment(blog_id):
    try:
        portal.add_comment(blog_id, session.get('user_name') or 'Student', request.form.get('content'))
        flash('Comment posted.', 'success')
    except ServiceError as e:
        flash(e.message, 'error')
    return redirect(url_for('student.blog_detail', blog_id=blog_id))


# -----------------------
# To-dos
# -----------------------
@student_bp.route('/todos')
@login_required
def todos():
    items = portal.get_todos(session['user_id'])
    return render_template(
        'student/todos.html',
        todos=items,
        summary=stats.todo_summary(items),
        tags=TODO_TAGS,
    )


@student_bp.route('/todos', methods=['POST'])
@login_required
def add_todo():
    try:
        portal.add_todo(session['user_id'], request.form.get('text'), request.form.get('tag', 'Study'))
    except ServiceError as e:
        flash(e.message, 'error')
    return redirect(url_for('student.todos'))


@student_bp.route('/todos/<int:todo_id>/toggle', methods=['POST'])
@login_required
def toggle_todo(todo_id):
    try:
        portal.toggle_todo(todo_id, session['user_id'])
    except ServiceError as e:
        flash(e.message, 'error')
    return redirect(url_for('student.todos'))


@student_bp.route('/todos/<int:todo_id>/delete', methods=['POST'])
@login_required
def delete_todo(todo_id):
    try:
        portal.delete_todo(todo_id, session['user_id'])
    except ServiceError as e:
        flash(e.message, 'error')
    return redirect(url_for('student.todos'))


# -----------------------
# Dashboard, quiz and assistant pages
# -----------------------
@student_bp.route('/dashboard')
@login_required
def dashboard():
    user_id = session['user_id']
    todo_items = portal.get_todos(user_id)
    results = portal.get_mcq_results(user_id)
    return render_template(
        'student/dashboard.html',
        user=current_user(),
        todo_stats=stats.todo_summary(todo_items),
        quiz_stats=stats.quiz_summary(results),
        results=results,
    )


@student_bp.route('/mcq-generator')
@login_required
def mcq_generator():
    return render_template(
        'student/mcq.html',
        subjects=SUBJECTS,
        max_count=current_app.config['MAX_MCQ_COUNT'],
    )


@student_bp.route('/ai-assistant')
@login_required
def ai_assistant():
    return render_template('student/assistant.html', ai_enabled=current_app.config.get('AI_ENABLED'))


@student_bp.route('/uploads/<path:filename>')
def uploaded_file(filename):
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)
