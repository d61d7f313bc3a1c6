# models/blog.py
from datetime import datetime

from extensions import db


class Blog(db.Model):
    __tablename__ = "blogs"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False, default="")  # markdown
    author = db.Column(db.String(120), nullable=False)
    date = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    image = db.Column(db.String(1024), nullable=True)
    likes = db.Column(db.Integer, nullable=False, default=0)

    comments = db.relationship(
        "Comment", backref="blog", cascade="all, delete-orphan",
        order_by="Comment.created_at", lazy=True,
    )
    like_rows = db.relationship("BlogLike", backref="blog", cascade="all, delete-orphan", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "author": self.author,
            "date": self.date.isoformat() if self.date else None,
            "image": self.image,
            "likes": self.likes or 0,
        }

    def __repr__(self):
        return f"<Blog {self.id} {self.title!r}>"


class Comment(db.Model):
    __tablename__ = "comments"
    id = db.Column(db.Integer, primary_key=True)
    blog_id = db.Column(db.Integer, db.ForeignKey("blogs.id"), nullable=False, index=True)
    user_name = db.Column(db.String(120), nullable=False)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "blog_id": self.blog_id,
            "user_name": self.user_name,
            "content": self.content,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class BlogLike(db.Model):
    __tablename__ = "blog_likes"
    __table_args__ = (db.UniqueConstraint("blog_id", "user_id", name="uq_blog_likes_blog_user"),)
    id = db.Column(db.Integer, primary_key=True)
    blog_id = db.Column(db.Integer, db.ForeignKey("blogs.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
