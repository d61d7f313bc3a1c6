# services/portal.py: data access shared by every view
import logging

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from extensions import db
from models import MATERIAL_MODELS, Blog, BlogLike, Comment, McqResult, Todo, User, material_model
from models.constants import (
    GRADES, MATERIAL_TYPES, PAST_PAPER, ROLE_ADMIN, ROLES, SUBJECTS, TODO_TAGS, YEARS,
)
from services.errors import ServiceError, wrap_db_error

logger = logging.getLogger(__name__)


def table_for(grade, material_type):
    return material_model(grade, material_type)


# -----------------------
# Users
# -----------------------
def login(email, password, role="user"):
    email = (email or "").strip().lower()
    if not email or not password:
        raise ServiceError("Please enter your email and password.")
    try:
        user = User.query.filter_by(email=email, role=role).first()
    except SQLAlchemyError as exc:
        raise wrap_db_error(exc, "Login")
    logger.debug("Login attempt for: %s (%s) -> found: %s", email, role, bool(user))
    if not user or not user.check_password(password):
        raise ServiceError(f'Authorized account for "{email}" not found or invalid credentials.')
    return user


def register(username, email, password, role="user", secret_key=None):
    username = (username or "").strip()
    email = (email or "").strip().lower()
    if role not in ROLES:
        raise ServiceError("Unknown account role.")
    if role == ROLE_ADMIN:
        expected = current_app.config.get("FACULTY_SECRET_KEY")
        if not expected or secret_key != expected:
            raise ServiceError("Invalid Faculty Secret Key. Access denied.")
    if not username or not email or not password:
        raise ServiceError("Username, email and password are required.")

    if User.query.filter_by(email=email).first():
        raise ServiceError("Email already registered.")

    user = User(username=username, email=email, role=role)
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ServiceError("Email already registered.")
    except SQLAlchemyError as exc:
        raise wrap_db_error(exc, "Registration")
    logger.info("Registered %s account %s", role, email)
    return user


def get_user(user_id):
    if user_id is None:
        return None
    return db.session.get(User, user_id)


# -----------------------
# Materials
# -----------------------
def _clean_material(data):
    title = (data.get("title") or "").strip()
    grade = data.get("grade")
    material_type = data.get("type")
    subject = data.get("subject")
    year = str(data.get("year") or "").strip() or None

    if not title:
        raise ServiceError("Title is required.")
    if grade not in GRADES:
        raise ServiceError(f"Unknown grade: {grade}")
    if material_type not in MATERIAL_TYPES:
        raise ServiceError(f"Unknown material type: {material_type}")
    if subject not in SUBJECTS:
        raise ServiceError(f"Unknown subject: {subject}")
    if material_type != PAST_PAPER:
        year = None
    elif year is not None and year not in YEARS:
        raise ServiceError(f"Year must be between {YEARS[-1]} and {YEARS[0]}.")

    return {
        "grade": grade,
        "type": material_type,
        "fields": {
            "title": title,
            "description": (data.get("description") or "").strip(),
            "subject": subject,
            "file_url": (data.get("file_url") or "").strip(),
            "file_name": (data.get("file_name") or "").strip() or title,
            "year": year,
        },
    }


def get_materials(grade, material_type):
    model = table_for(grade, material_type)
    try:
        return model.query.order_by(model.created_at.desc(), model.id.desc()).all()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.warning("Fetch failure for %s: %s", model.__tablename__, exc)
        return []


def get_all_materials():
    items = []
    for model in MATERIAL_MODELS:
        items.extend(get_materials(model.grade, model.material_type))
    return items


def get_material(material_id, grade, material_type):
    return db.session.get(table_for(grade, material_type), material_id)


def add_material(data):
    cleaned = _clean_material(data)
    model = table_for(cleaned["grade"], cleaned["type"])
    material = model(**cleaned["fields"])
    db.session.add(material)
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        raise wrap_db_error(exc, f"Insertion into {model.__tablename__}")
    return material


def update_material(material_id, data, original_grade, original_type):
    """Update a material; a grade or type change moves it to another table."""
    cleaned = _clean_material(data)
    original_model = table_for(original_grade, original_type)
    new_model = table_for(cleaned["grade"], cleaned["type"])

    existing = db.session.get(original_model, material_id)
    if existing is None:
        raise ServiceError("Material not found.")

    if original_model is new_model:
        for key, value in cleaned["fields"].items():
            setattr(existing, key, value)
        material = existing
        context = "Updating Record"
    else:
        db.session.delete(existing)
        material = new_model(**cleaned["fields"])
        db.session.add(material)
        context = "Migration"
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        raise wrap_db_error(exc, context)
    return material


def delete_material(material_id, grade, material_type):
    model = table_for(grade, material_type)
    material = db.session.get(model, material_id)
    if material is None:
        raise ServiceError("Material not found.")
    db.session.delete(material)
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        raise wrap_db_error(exc, f"Deletion from {model.__tablename__}")


# -----------------------
# Blogs, comments, likes
# -----------------------
def get_blogs():
    try:
        return Blog.query.order_by(Blog.date.desc(), Blog.id.desc()).all()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.warning("Fetch failure for blogs: %s", exc)
        return []


def get_blog(blog_id):
    try:
        return db.session.get(Blog, blog_id)
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.warning("Fetch failure for blog %s: %s", blog_id, exc)
        return None


def _clean_blog(data):
    title = (data.get("title") or "").strip()
    author = (data.get("author") or "").strip()
    if not title or not author:
        raise ServiceError("Title and author are required.")
    return {
        "title": title,
        "content": data.get("content") or "",
        "author": author,
        "image": (data.get("image") or "").strip() or None,
    }


def add_blog(data):
    blog = Blog(**_clean_blog(data))
    db.session.add(blog)
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        raise wrap_db_error(exc, "Blog Archival")
    return blog


def update_blog(blog_id, data):
    blog = db.session.get(Blog, blog_id)
    if blog is None:
        raise ServiceError("Blog not found.")
    for key, value in _clean_blog(data).items():
        setattr(blog, key, value)
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        raise wrap_db_error(exc, "Blog Update")
    return blog


def delete_blog(blog_id):
    blog = db.session.get(Blog, blog_id)
    if blog is None:
        raise ServiceError("Blog not found.")
    db.session.delete(blog)
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        raise wrap_db_error(exc, "Blog Deletion")


def get_comments(blog_id):
    try:
        return (Comment.query.filter_by(blog_id=blog_id)
                .order_by(Comment.created_at.asc(), Comment.id.asc()).all())
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.warning("Error fetching comments: %s", exc)
        return []


def add_comment(blog_id, user_name, content):
    content = (content or "").strip()
    if not content:
        raise ServiceError("Comment cannot be empty.")
    if get_blog(blog_id) is None:
        raise ServiceError("Blog not found.")
    comment = Comment(blog_id=blog_id, user_name=user_name, content=content)
    db.session.add(comment)
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        raise wrap_db_error(exc, "Add Comment")
    return comment


def has_user_liked(blog_id, user_id):
    return BlogLike.query.filter_by(blog_id=blog_id, user_id=user_id).first() is not None


def toggle_blog_like(blog_id, user_id):
    """Flip the user's like on a blog. Returns (liked, count)."""
    blog = db.session.get(Blog, blog_id)
    if blog is None:
        raise ServiceError("Blog not found.")

    existing = BlogLike.query.filter_by(blog_id=blog_id, user_id=user_id).first()
    count = blog.likes or 0
    if existing is not None:
        db.session.delete(existing)
        count = max(0, count - 1)
    else:
        db.session.add(BlogLike(blog_id=blog_id, user_id=user_id))
        count += 1
    blog.likes = count
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        raise wrap_db_error(exc, "Update Likes")
    return existing is None, count


# -----------------------
# Todos
# -----------------------
def get_todos(user_id):
    try:
        return (Todo.query.filter_by(user_id=user_id)
                .order_by(Todo.created_at.desc(), Todo.id.desc()).all())
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error("Error fetching todos: %s", exc)
        return []


def _owned_todo(todo_id, user_id):
    todo = Todo.query.filter_by(id=todo_id, user_id=user_id).first()
    if todo is None:
        raise ServiceError("Task not found.")
    return todo


def add_todo(user_id, text, tag="Study"):
    text = (text or "").strip()
    if not text:
        raise ServiceError("Task text cannot be empty.")
    if tag not in TODO_TAGS:
        raise ServiceError(f"Unknown tag: {tag}")
    todo = Todo(user_id=user_id, text=text, tag=tag, is_completed=False)
    db.session.add(todo)
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        raise wrap_db_error(exc, "Add Todo")
    return todo


def set_todo_completed(todo_id, user_id, is_completed):
    todo = _owned_todo(todo_id, user_id)
    todo.is_completed = bool(is_completed)
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        raise wrap_db_error(exc, "Toggle Todo")
    return todo


def toggle_todo(todo_id, user_id):
    todo = _owned_todo(todo_id, user_id)
    return set_todo_completed(todo_id, user_id, not todo.is_completed)


def delete_todo(todo_id, user_id):
    todo = _owned_todo(todo_id, user_id)
    db.session.delete(todo)
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        raise wrap_db_error(exc, "Delete Todo")


# -----------------------
# MCQ results
# -----------------------
def get_mcq_results(user_id):
    try:
        return (McqResult.query.filter_by(user_id=user_id)
                .order_by(McqResult.created_at.desc(), McqResult.id.desc()).all())
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.warning("Error fetching mcq results: %s", exc)
        return []


def add_mcq_result(user_id, subject, topic, score, total_questions, percentage):
    result = McqResult(
        user_id=user_id,
        subject=subject or "General",
        topic=topic,
        score=score,
        total_questions=total_questions,
        percentage=percentage,
    )
    db.session.add(result)
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        raise wrap_db_error(exc, "Save Quiz Result")
    return result
