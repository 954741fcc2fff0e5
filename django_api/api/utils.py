"""
Construction of the analysis engine and comment source used by the views
"""
from functools import lru_cache

from django.conf import settings

from comment_analysis import AnalysisConfig, CommentAnalysisEngine, build_vectorizer
from comment_analysis.youtube import YouTubeCommentSource


@lru_cache(maxsize=1)
def get_engine() -> CommentAnalysisEngine:
    """Build the engine once per process; its model handles are read-only afterwards"""
    config = AnalysisConfig.from_env()
    return CommentAnalysisEngine(build_vectorizer(config), config=config)


@lru_cache(maxsize=1)
def get_comment_source() -> YouTubeCommentSource:
    return YouTubeCommentSource(api_key=settings.YOUTUBE_API_KEY)
