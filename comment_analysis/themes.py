"""
Deterministic theme extraction for a cluster of comments.

The key phrase is the most frequent bigram or trigram once stopwords and
short tokens are removed; the headline is the comment nearest the cluster's
mean embedding. No model calls are made here.
"""
import re
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

STOPWORDS = frozenset([
    'the', 'and', 'for', 'are', 'but', 'not', 'with', 'you', 'that', 'this',
    'have', 'from', 'they', 'your', 'was', 'what', 'when', 'will', 'just',
    'about', 'would', 'there', 'their', 'could', 'should', 'them', 'then',
    'than', 'some', 'more', 'like', 'into', 'only', 'over', 'such', 'very',
    'much', 'even', 'know', 'been', 'can', 'who', 'out', 'get', 'has', 'all',
    'too', 'got', 'our', 'had', 'did', 'why', 'how', 'his', 'her', 'him',
    'she', 'himself', 'herself', 'my', 'mine', 'we', 'us', 'were', 'where',
    'which', 'because', 'on', 'in', 'at', 'to', 'of', 'is', 'it', 'as', 'by',
    'an', 'be', 'or', 'if', 'so', 'do', 'no', 'yes', 'up', 'down', 'off', 'a',
    'i', 'me', 'he', 'see', 'say', 'said', 'also', 'am', 'im', 'u', 'rt',
    'its', 'dont', 'does', 'doesnt', 'cant', 'wont', 'youre', 'youve',
    'youll', 'ill', 'ive', 'didnt', 'wasnt', 'arent', 'isnt', 'aint', 'lets',
])

MIN_TOKEN_LENGTH = 3
NGRAM_SIZES = (2, 3)

_TOKEN_SPLIT = re.compile(r"\W+")


@dataclass(frozen=True)
class Theme:
    key_phrase: str
    headline: str


def tokenize(text: str) -> List[str]:
    """Lowercase, split on non-word characters, drop stopwords and short tokens"""
    return [
        word for word in _TOKEN_SPLIT.split((text or "").lower())
        if word and len(word) >= MIN_TOKEN_LENGTH and word not in STOPWORDS
    ]


def extract_key_phrase(texts: Sequence[str]) -> str:
    ngrams = Counter()
    for text in texts:
        words = tokenize(text)
        for n in NGRAM_SIZES:
            for i in range(len(words) - n + 1):
                ngrams[" ".join(words[i:i + n])] += 1

    if not ngrams:
        return ""

    # sorted() is stable and Counter keeps insertion order, so ties go to the
    # phrase seen first
    ranked = sorted(ngrams.items(), key=lambda item: item[1], reverse=True)
    return ranked[0][0]


def find_central_index(embeddings) -> Optional[int]:
    """Index of the embedding closest (squared Euclidean) to the mean embedding"""
    if embeddings is None or len(embeddings) == 0:
        return None

    points = np.asarray([np.asarray(e, dtype=float) for e in embeddings], dtype=float)
    centroid = points.mean(axis=0)
    squared_distances = ((points - centroid) ** 2).sum(axis=1)
    return int(np.argmin(squared_distances))


def extract_theme(texts: Sequence[str], embeddings=None) -> Theme:
    """
    Derive a short label and a representative headline for a cluster.

    Args:
        texts: the cluster's comment texts
        embeddings: the matching embeddings, positionally aligned with texts

    Returns:
        Theme with an empty key phrase when no n-gram survives filtering and an
        empty headline when no embeddings are supplied
    """
    key_phrase = extract_key_phrase(texts)

    headline = ""
    central = find_central_index(embeddings)
    if central is not None and central < len(texts):
        headline = texts[central] or ""

    return Theme(key_phrase=key_phrase, headline=headline)
