"""
Comment section analysis: thematic clustering, sentiment, bias and diversity
"""
from .analysis_engine import CommentAnalysisEngine
from .config import AnalysisConfig
from .models import AnalysisResult, BiasMetrics, Cluster, Comment, VideoDetails
from .vectorizer import InferenceApiVectorizer, LocalVectorizer, Vectorizer, build_vectorizer

__all__ = [
    "AnalysisConfig",
    "AnalysisResult",
    "BiasMetrics",
    "Cluster",
    "Comment",
    "CommentAnalysisEngine",
    "InferenceApiVectorizer",
    "LocalVectorizer",
    "Vectorizer",
    "VideoDetails",
    "build_vectorizer",
]
