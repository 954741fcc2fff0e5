"""
Vectorizer adapters: text -> embedding vector and text -> sentiment polarity.

Every adapter is fail-open. A provider error, a malformed response or a call
that times out yields a zero vector (for embeddings) or 0.0 (for sentiment),
and the failure is logged rather than raised, so one bad call cannot abort a
whole batch.

Two interchangeable backends are provided:

- ``LocalVectorizer`` runs Hugging Face models in-process.
- ``InferenceApiVectorizer`` calls the Hugging Face Inference API over HTTP.
"""
import logging
import math
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Callable, List, Optional, Sequence

import numpy as np
import requests
from tqdm.auto import tqdm

from .config import AnalysisConfig
from .embedder import CommentEmbedder
from .exceptions import ConfigurationError, ProviderError
from .sentiment import SentimentClassifier, label_to_polarity

logger = logging.getLogger(__name__)


class Vectorizer(ABC):
    """Base adapter. Subclasses implement ``_embed`` and ``_sentiment``, which may raise."""

    def __init__(self, dimension: int = 384, timeout: float = 30.0, max_workers: int = 8):
        if dimension <= 0:
            raise ValueError("dimension must be positive")
        self.dimension = dimension
        self.timeout = timeout
        self.max_workers = max(1, max_workers)

    @abstractmethod
    def _embed(self, text: str) -> Any:
        """Return the raw embedding for non-empty text; may raise"""

    @abstractmethod
    def _sentiment(self, text: str) -> float:
        """Return the raw polarity for non-empty text; may raise"""

    def zero_vector(self) -> np.ndarray:
        return np.zeros(self.dimension, dtype=float)

    def _check_vector(self, vector: Any) -> np.ndarray:
        try:
            vector = np.asarray(vector, dtype=float)
        except (TypeError, ValueError) as e:
            raise ProviderError(f"Embedding is not numeric: {e}") from e
        if vector.shape != (self.dimension,):
            raise ProviderError(f"Expected an embedding of shape ({self.dimension},), got {vector.shape}")
        if not np.all(np.isfinite(vector)):
            raise ProviderError("Embedding contains NaN or infinite values")
        return vector

    @staticmethod
    def _check_polarity(value: Any) -> float:
        try:
            value = float(value)
        except (TypeError, ValueError) as e:
            raise ProviderError(f"Sentiment is not numeric: {e}") from e
        if not math.isfinite(value):
            raise ProviderError("Sentiment is not finite")
        return max(-1.0, min(1.0, value))

    def embed(self, text: str) -> np.ndarray:
        if not text or not text.strip():
            return self.zero_vector()
        try:
            return self._check_vector(self._embed(text))
        except Exception as e:
            logger.warning(f"Embedding failed, using zero vector: {e}")
            return self.zero_vector()

    def sentiment(self, text: str) -> float:
        if not text or not text.strip():
            return 0.0
        try:
            return self._check_polarity(self._sentiment(text))
        except Exception as e:
            logger.warning(f"Sentiment scoring failed, using neutral score: {e}")
            return 0.0

    def embed_many(self, texts: Sequence[str]) -> List[np.ndarray]:
        """Embed every text concurrently; ``result[i]`` belongs to ``texts[i]``"""
        return self._map_concurrently(self.embed, texts, self.zero_vector)

    def sentiment_many(self, texts: Sequence[str]) -> List[float]:
        return self._map_concurrently(self.sentiment, texts, lambda: 0.0)

    def _map_concurrently(self, func: Callable[[str], Any], texts: Sequence[str],
                          fallback: Callable[[], Any]) -> List[Any]:
        if not texts:
            return []

        workers = min(self.max_workers, len(texts))
        # Each wave of `workers` calls gets one timeout window
        budget = self.timeout * math.ceil(len(texts) / workers)
        results: List[Any] = [None] * len(texts)

        executor = ThreadPoolExecutor(max_workers=workers)
        try:
            futures = {executor.submit(func, text): index for index, text in enumerate(texts)}
            done, not_done = wait(futures, timeout=budget)

            for future in done:
                index = futures[future]
                error = future.exception()
                if error is not None:
                    logger.warning(f"Provider call {index} raised {error!r}, using fallback")
                    results[index] = fallback()
                else:
                    results[index] = future.result()

            if not_done:
                logger.warning(f"{len(not_done)} provider calls timed out after {budget:.1f}s, using fallback")
                for future in not_done:
                    future.cancel()
                    results[futures[future]] = fallback()
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return results


class LocalVectorizer(Vectorizer):
    """Runs the embedding and sentiment models locally, batching instead of threading"""

    def __init__(self,
                 config: Optional[AnalysisConfig] = None,
                 embedder: Optional[CommentEmbedder] = None,
                 classifier: Optional[SentimentClassifier] = None,
                 show_progress: bool = False):
        config = config or AnalysisConfig()
        self.embedder = embedder or CommentEmbedder(
            model_name=config.embedding_model,
            device=config.device,
        )
        self.classifier = classifier or SentimentClassifier(
            model_name=config.sentiment_model,
            device=config.device,
        )
        self.batch_size = max(1, config.batch_size)
        self.show_progress = show_progress
        super().__init__(dimension=self.embedder.dimension, timeout=config.provider_timeout, max_workers=1)

    def _embed(self, text: str) -> np.ndarray:
        return self.embedder.embed_batch([text])[0]

    def _sentiment(self, text: str) -> float:
        return self.classifier.polarity_batch([text])[0]

    def embed_many(self, texts: Sequence[str]) -> List[np.ndarray]:
        return self._run_batched(texts, self.embedder.embed_batch, self._check_vector,
                                 self.embed, self.zero_vector, "Embedding comments")

    def sentiment_many(self, texts: Sequence[str]) -> List[float]:
        return self._run_batched(texts, self.classifier.polarity_batch, self._check_polarity,
                                 self.sentiment, lambda: 0.0, "Scoring sentiment")

    def _run_batched(self, texts, batch_func, check, single_func, empty_value, desc) -> List[Any]:
        results: List[Any] = [empty_value() for _ in texts]
        pending = [i for i, text in enumerate(texts) if text and text.strip()]

        starts = range(0, len(pending), self.batch_size)
        for start in tqdm(starts, desc=desc, disable=not self.show_progress):
            indices = pending[start:start + self.batch_size]
            batch = [texts[i] for i in indices]
            try:
                values = batch_func(batch)
                if len(values) != len(batch):
                    raise ProviderError(f"Model returned {len(values)} results for {len(batch)} texts")
                for index, value in zip(indices, values):
                    results[index] = check(value)
            except Exception as e:
                logger.warning(f"{desc} batch failed ({e}); retrying {len(batch)} comments one by one")
                for index in indices:
                    results[index] = single_func(texts[index])

        return results


class InferenceApiVectorizer(Vectorizer):
    """Calls the Hugging Face Inference API for embeddings and sentiment"""

    def __init__(self,
                 api_key: Optional[str],
                 config: Optional[AnalysisConfig] = None,
                 session: Optional[requests.Session] = None):
        if not api_key:
            raise ConfigurationError("HUGGINGFACE_API_KEY is required for the remote vectorizer backend")

        config = config or AnalysisConfig()
        super().__init__(dimension=config.embedding_dimension,
                         timeout=config.provider_timeout,
                         max_workers=config.max_workers)
        self.api_url = config.inference_api_url.rstrip("/")
        self.embedding_model = config.embedding_model
        self.sentiment_model = config.sentiment_model

        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        })

    def _post(self, model: str, text: str) -> Any:
        url = f"{self.api_url}/{model}"
        try:
            response = self.session.post(
                url,
                json={"inputs": text, "options": {"wait_for_model": True}},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise ProviderError(f"Request to {model} failed: {e}") from e

        if response.status_code == 429:
            raise ProviderError(f"Rate limited by {model}")
        if not response.ok:
            raise ProviderError(f"{model} returned HTTP {response.status_code}: {response.text[:200]}")

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError(f"{model} returned malformed JSON") from e

        if isinstance(payload, dict) and "error" in payload:
            raise ProviderError(f"{model} returned an error: {payload['error']}")
        return payload

    def _embed(self, text: str) -> np.ndarray:
        return parse_embedding_payload(self._post(self.embedding_model, text))

    def _sentiment(self, text: str) -> float:
        return parse_sentiment_payload(self._post(self.sentiment_model, text))


def parse_embedding_payload(payload: Any) -> np.ndarray:
    """
    Turn a feature-extraction response into one vector.

    Accepts a pooled vector, a token-level matrix (mean pooled) or a batch of
    token-level matrices (first item, mean pooled).
    """
    if isinstance(payload, dict):
        if "embeddings" not in payload:
            raise ProviderError(f"Unexpected embedding response keys: {sorted(payload)}")
        payload = payload["embeddings"]

    try:
        array = np.asarray(payload, dtype=float)
    except (TypeError, ValueError) as e:
        raise ProviderError(f"Unexpected embedding response format: {e}") from e

    if array.ndim == 1 and len(array) > 0:
        return array
    if array.ndim == 2 and len(array) > 0:
        return array.mean(axis=0)
    if array.ndim == 3 and len(array) > 0 and array.shape[1] > 0:
        return array[0].mean(axis=0)
    raise ProviderError(f"Unexpected embedding response shape {array.shape}")


def parse_sentiment_payload(payload: Any) -> float:
    """Pick the top-scoring label from a text-classification response"""
    if isinstance(payload, list) and payload and isinstance(payload[0], list):
        payload = payload[0]
    if isinstance(payload, dict):
        payload = [payload]

    candidates = [
        item for item in payload or []
        if isinstance(item, dict) and "label" in item and "score" in item
    ] if isinstance(payload, list) else []
    if not candidates:
        raise ProviderError(f"Unexpected sentiment response format: {payload!r}")

    best = max(candidates, key=lambda item: float(item["score"]))
    return label_to_polarity(best["label"], best["score"])


def build_vectorizer(config: Optional[AnalysisConfig] = None) -> Vectorizer:
    """Construct the backend named by ``config.vectorizer_backend``"""
    config = config or AnalysisConfig.from_env()
    logger.info(f"Using the {config.vectorizer_backend} vectorizer backend")

    if config.vectorizer_backend == "remote":
        return InferenceApiVectorizer(api_key=config.huggingface_api_key, config=config)
    return LocalVectorizer(config=config)
