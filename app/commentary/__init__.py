from app.commentary.client import GeminiClient, CommentaryError
from app.commentary.service import CommentaryService

__all__ = ["GeminiClient", "CommentaryError", "CommentaryService"]
