"""
Shared fixtures: a deterministic in-memory vectorizer and comment factories
"""
import logging
from typing import Dict, Optional, Sequence, Set

import numpy as np
import pytest

from comment_analysis.exceptions import ProviderError
from comment_analysis.models import Comment
from comment_analysis.vectorizer import Vectorizer

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


class FakeVectorizer(Vectorizer):
    """Returns fixed vectors and polarities per text; unknown texts embed to zeros"""

    def __init__(self,
                 vectors: Optional[Dict[str, Sequence[float]]] = None,
                 polarities: Optional[Dict[str, float]] = None,
                 dimension: int = 2,
                 failing: Optional[Set[str]] = None,
                 **kwargs):
        super().__init__(dimension=dimension, **kwargs)
        self.vectors = vectors or {}
        self.polarities = polarities or {}
        self.failing = failing or set()
        self.embed_calls = []

    def _embed(self, text):
        self.embed_calls.append(text)
        if text in self.failing:
            raise ProviderError(f"provider down for {text!r}")
        return self.vectors.get(text, np.zeros(self.dimension))

    def _sentiment(self, text):
        if text in self.failing:
            raise ProviderError(f"provider down for {text!r}")
        return self.polarities.get(text, 0.0)


def make_comments(texts: Sequence[str]):
    return [
        Comment(id=f"c{i}", text=text, author=f"user{i}", like_count=i, published_at="2024-01-01T00:00:00Z")
        for i, text in enumerate(texts)
    ]


@pytest.fixture
def orthogonal_vectorizer():
    """Two comments pointing along x, two along y"""
    return FakeVectorizer(
        vectors={
            "Great tutorial on python decorators": [1.0, 0.0],
            "Python decorators finally make sense": [1.0, 0.0],
            "The government policy on taxes is wrong": [0.0, 1.0],
            "Government policy needs a rethink": [0.0, 1.0],
        },
        polarities={
            "Great tutorial on python decorators": 0.9,
            "Python decorators finally make sense": 0.7,
            "The government policy on taxes is wrong": -0.8,
            "Government policy needs a rethink": -0.4,
        },
    )


@pytest.fixture
def orthogonal_comments():
    return make_comments([
        "Great tutorial on python decorators",
        "Python decorators finally make sense",
        "The government policy on taxes is wrong",
        "Government policy needs a rethink",
    ])
