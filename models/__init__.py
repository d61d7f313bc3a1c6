from models.user import User
from models.material import (
    MATERIAL_MODELS,
    Grade9Note,
    Grade9PastPaper,
    Grade10Note,
    Grade10PastPaper,
    material_model,
)
from models.blog import Blog, BlogLike, Comment
from models.todo import Todo
from models.mcq_result import McqResult

__all__ = [
    "User",
    "MATERIAL_MODELS",
    "Grade9Note",
    "Grade9PastPaper",
    "Grade10Note",
    "Grade10PastPaper",
    "material_model",
    "Blog",
    "BlogLike",
    "Comment",
    "Todo",
    "McqResult",
]
