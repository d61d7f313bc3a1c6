# routes/admin.py
from flask import Blueprint, abort, current_app, flash, redirect, render_template, request, url_for

from helpers import admin_required, save_upload
from models.constants import GRADE_SLUGS, GRADES, MATERIAL_TYPES, SUBJECTS, TYPE_SLUGS, YEARS
from services import portal
from services.errors import ServiceError
from services.text import ALL, build_repository, filter_repository

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')

DEFAULT_BLOG_IMAGE = "https://images.unsplash.com/photo-1516321318423-f06f85e504b3?auto=format&fit=crop&q=80&w=1200"

# type filter of the repository view also accepts the blog category
REPOSITORY_TYPES = MATERIAL_TYPES + ("Blog",)


def _resolve(grade_slug, type_slug):
    try:
        return GRADE_SLUGS[grade_slug], TYPE_SLUGS[type_slug]
    except KeyError:
        abort(404)


def _material_form():
    data = {
        "title": request.form.get("title"),
        "description": request.form.get("description"),
        "grade": request.form.get("grade"),
        "subject": request.form.get("subject"),
        "type": request.form.get("type"),
        "file_url": request.form.get("file_url"),
        "file_name": request.form.get("file_name"),
        "year": request.form.get("year"),
    }
    stored = save_upload(request.files.get("file"))
    if stored:
        data["file_url"], uploaded_name = stored
        data["file_name"] = data["file_name"] or uploaded_name
    return data


def _form_values(material):
    return {
        "title": material.title,
        "description": material.description,
        "grade": material.grade,
        "subject": material.subject,
        "type": material.material_type,
        "file_url": material.file_url,
        "file_name": material.file_name,
        "year": material.year,
    }


def _render_material_form(material=None, form=None, status=200):
    if form is None:
        form = _form_values(material) if material else {"year": YEARS[0]}
    return render_template(
        'admin/material_form.html',
        material=material,
        form=form,
        grades=GRADES,
        subjects=SUBJECTS,
        material_types=MATERIAL_TYPES,
        years=YEARS,
    ), status


@admin_bp.route('/')
@admin_required
def dashboard():
    query = request.args.get('q', '').strip()
    type_filter = request.args.get('type', ALL)
    grade = request.args.get('grade', ALL)
    subject = request.args.get('subject', ALL)

    rows = build_repository(portal.get_all_materials(), portal.get_blogs())
    return render_template(
        'admin/dashboard.html',
        rows=filter_repository(rows, query, type_filter, grade, subject),
        total=len(rows),
        query=query,
        type_filter=type_filter,
        grade=grade,
        subject=subject,
        grades=GRADES,
        subjects=SUBJECTS,
        repository_types=REPOSITORY_TYPES,
    )


# -----------------------
# Materials
# -----------------------
@admin_bp.route('/materials/new', methods=['GET', 'POST'])
@admin_required
def new_material():
    if request.method == 'POST':
        try:
            material = portal.add_material(_material_form())
        except (ServiceError, ValueError) as e:
            flash(getattr(e, 'message', str(e)), 'error')
            return _render_material_form(form=request.form, status=400)
        current_app.logger.info("Material archived: %s (%s)", material.title, material.__tablename__)
        flash(f"Archived: {material.title}", 'success')
        return redirect(url_for('admin.dashboard'))
    return _render_material_form()


@admin_bp.route('/materials/<grade_slug>/<type_slug>/<int:material_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_material(grade_slug, type_slug, material_id):
    grade, material_type = _resolve(grade_slug, type_slug)
    material = portal.get_material(material_id, grade, material_type)
    if material is None:
        abort(404)

    if request.method == 'POST':
        try:
            updated = portal.update_material(material_id, _material_form(), grade, material_type)
        except (ServiceError, ValueError) as e:
            flash(getattr(e, 'message', str(e)), 'error')
            return _render_material_form(material, form=request.form, status=400)
        flash(f"Modified: {updated.title}", 'success')
        return redirect(url_for('admin.dashboard'))
    return _render_material_form(material)


@admin_bp.route('/materials/<grade_slug>/<type_slug>/<int:material_id>/delete', methods=['POST'])
@admin_required
def delete_material(grade_slug, type_slug, material_id):
    grade, material_type = _resolve(grade_slug, type_slug)
    try:
        portal.delete_material(material_id, grade, material_type)
        flash('Resource purged from database.', 'success')
    except ServiceError as e:
        flash(e.message, 'error')
    return redirect(url_for('admin.dashboard'))


# -----------------------
# Blogs
# -----------------------
def _blog_form():
    return {
        "title": request.form.get("title"),
        "content": request.form.get("content"),
        "author": request.form.get("author"),
        "image": request.form.get("image"),
    }


@admin_bp.route('/blogs/new', methods=['GET', 'POST'])
@admin_required
def new_blog():
    if request.method == 'POST':
        try:
            blog = portal.add_blog(_blog_form())
        except ServiceError as e:
            flash(e.message, 'error')
            return render_template('admin/blog_form.html', blog=None, form=request.form), 400
        flash(f"Insight Archived: {blog.title}", 'success')
        return redirect(url_for('admin.dashboard'))
    return render_template('admin/blog_form.html', blog=None, form={"image": DEFAULT_BLOG_IMAGE})


@admin_bp.route('/blogs/<int:blog_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_blog(blog_id):
    blog = portal.get_blog(blog_id)
    if blog is None:
        abort(404)
    if request.method == 'POST':
        try:
            portal.update_blog(blog_id, _blog_form())
        except ServiceError as e:
            flash(e.message, 'error')
            return render_template('admin/blog_form.html', blog=blog, form=request.form), 400
        flash(f"Insight Updated: {blog.title}", 'success')
        return redirect(url_for('admin.dashboard'))
    return render_template('admin/blog_form.html', blog=blog, form=blog.to_dict())


@admin_bp.route('/blogs/<int:blog_id>/delete', methods=['POST'])
@admin_required
def delete_blog(blog_id):
    try:
        portal.delete_blog(blog_id)
        flash('Insight purged from database.', 'success')
    except ServiceError as e:
        flash(e.message, 'error')
    return redirect(url_for('admin.dashboard'))
