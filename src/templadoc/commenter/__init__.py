from .comment_generator import CommentGenerator, CommentTask

__all__ = [
    "CommentGenerator",
    "CommentTask",
]
