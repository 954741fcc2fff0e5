"""
Exception types raised by the comment analysis pipeline
"""


class CommentAnalysisError(Exception):
    """Base class for all comment analysis errors"""


class ConfigurationError(CommentAnalysisError):
    """Raised when the pipeline is configured inconsistently (unknown backend, missing API key)"""


class ProviderError(CommentAnalysisError):
    """Raised by an embedding or sentiment backend when a single call fails.

    The Vectorizer catches these and degrades to a zero vector or a neutral
    score, so callers of ``embed``/``sentiment`` never see them.
    """


class CommentSourceError(CommentAnalysisError):
    """Raised when comments or video details cannot be fetched"""


class VideoNotFoundError(CommentSourceError):
    """Raised when the video lookup returns no video for the given id"""
