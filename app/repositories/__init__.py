"""
app/repositories package marker.
"""

from app.repositories.comment_query_repository import CommentQueryRepository

__all__ = [
    "CommentQueryRepository",
]
