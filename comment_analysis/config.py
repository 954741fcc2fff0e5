"""
Configuration for the comment analysis pipeline.

Values come from environment variables (a ``.env`` file is honoured through
python-dotenv) and can be overridden with keyword arguments.
"""
import os
from dataclasses import dataclass, fields, replace
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

VECTORIZER_BACKENDS = ("local", "remote")


@dataclass(frozen=True)
class AnalysisConfig:
    # Cluster-count policy: batches of at least `large_batch_threshold`
    # comments use n // large_batch_divisor clamped to the large range,
    # smaller batches use n // small_batch_divisor clamped to the small range.
    large_batch_threshold: int = 15
    large_batch_divisor: int = 10
    large_batch_min_clusters: int = 3
    large_batch_max_clusters: int = 5
    small_batch_divisor: int = 7
    small_batch_min_clusters: int = 2
    small_batch_max_clusters: int = 3
    min_clusters: int = 2
    max_clusters: int = 5
    max_iterations: int = 100

    # Providers
    vectorizer_backend: str = "local"
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    sentiment_model: str = "distilbert-base-uncased-finetuned-sst-2-english"
    embedding_dimension: int = 384
    inference_api_url: str = "https://api-inference.huggingface.co/models"
    huggingface_api_key: Optional[str] = None
    provider_timeout: float = 30.0
    max_workers: int = 8
    batch_size: int = 16
    device: Optional[str] = None

    # Summary thresholds
    high_diversity_threshold: float = 0.7
    moderate_diversity_threshold: float = 0.4
    bias_summary_threshold: float = 0.5

    # Comment source
    youtube_api_key: Optional[str] = None
    default_max_results: int = 100

    def __post_init__(self):
        if self.vectorizer_backend not in VECTORIZER_BACKENDS:
            raise ConfigurationError(
                f"Unknown vectorizer backend '{self.vectorizer_backend}', "
                f"expected one of {', '.join(VECTORIZER_BACKENDS)}"
            )
        if self.min_clusters > self.max_clusters:
            raise ConfigurationError("min_clusters must not exceed max_clusters")
        if self.embedding_dimension <= 0:
            raise ConfigurationError("embedding_dimension must be positive")
        if self.max_iterations < 1:
            raise ConfigurationError("max_iterations must be at least 1")

    @classmethod
    def from_env(cls, **overrides) -> "AnalysisConfig":
        """Build a config from environment variables; keyword overrides win."""
        load_dotenv()

        env = {
            "vectorizer_backend": os.getenv("VECTORIZER_BACKEND") or None,
            "embedding_model": os.getenv("EMBEDDING_MODEL") or None,
            "sentiment_model": os.getenv("SENTIMENT_MODEL") or None,
            "embedding_dimension": _int_env("EMBEDDING_DIMENSION"),
            "inference_api_url": os.getenv("HUGGINGFACE_API_URL") or None,
            "huggingface_api_key": os.getenv("HUGGINGFACE_API_KEY") or None,
            "provider_timeout": _float_env("PROVIDER_TIMEOUT"),
            "max_workers": _int_env("PROVIDER_MAX_WORKERS"),
            "batch_size": _int_env("EMBEDDING_BATCH_SIZE"),
            "device": os.getenv("TORCH_DEVICE") or None,
            "youtube_api_key": os.getenv("YOUTUBE_API_KEY") or None,
            "default_max_results": _int_env("MAX_COMMENTS"),
        }
        values = {key: value for key, value in env.items() if value is not None}
        values.update(overrides)
        return cls(**values)

    def with_overrides(self, **overrides) -> "AnalysisConfig":
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigurationError(f"Unknown config fields: {sorted(unknown)}")
        return replace(self, **overrides)


def _int_env(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got '{value}'")


def _float_env(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value == "":
        return None
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got '{value}'")
