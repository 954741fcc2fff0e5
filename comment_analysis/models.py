"""
Data model for a single comment analysis run.

All objects are created fresh per request and are not mutated afterwards.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Comment:
    id: str
    text: str
    author: str = ""
    like_count: int = 0
    published_at: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_id: Any = "") -> "Comment":
        """Build a comment from either the camelCase wire shape or snake_case keys.

        Missing or null text is treated as an empty string rather than rejected.
        """
        text = data.get("text", data.get("comment"))
        like_count = data.get("likeCount", data.get("like_count"))
        try:
            like_count = int(like_count or 0)
        except (TypeError, ValueError):
            like_count = 0

        comment_id = data.get("id")
        if comment_id is None:
            comment_id = default_id

        return cls(
            id=str(comment_id),
            text="" if text is None else str(text),
            author=str(data.get("author") or ""),
            like_count=like_count,
            published_at=str(data.get("publishedAt", data.get("published_at")) or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "author": self.author,
            "likeCount": self.like_count,
            "publishedAt": self.published_at,
        }


@dataclass(frozen=True)
class BiasMetrics:
    political: float = 0.0
    emotional: float = 0.0
    moral: float = 0.0

    @classmethod
    def neutral(cls) -> "BiasMetrics":
        return cls(0.0, 0.0, 0.0)

    def to_dict(self) -> Dict[str, float]:
        return {
            "political": self.political,
            "emotional": self.emotional,
            "moral": self.moral,
        }


@dataclass
class Cluster:
    """A group of comments sharing a theme.

    ``size`` must equal ``len(comments)``; a mismatch is a programming error.
    """
    id: str
    theme: str
    headline: str
    comments: List[Comment]
    sentiment: float
    size: int

    def __post_init__(self):
        if self.size != len(self.comments):
            raise ValueError(
                f"Cluster {self.id} has size {self.size} but holds {len(self.comments)} comments"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "theme": self.theme,
            "headline": self.headline,
            "comments": [comment.to_dict() for comment in self.comments],
            "sentiment": self.sentiment,
            "size": self.size,
        }


@dataclass(frozen=True)
class VideoDetails:
    video_id: str
    title: str = ""
    channel_title: str = ""


@dataclass
class AnalysisResult:
    clusters: List[Cluster] = field(default_factory=list)
    diversity_score: float = 0.0
    bias_metrics: BiasMetrics = field(default_factory=BiasMetrics.neutral)
    summary: str = ""
    video: Optional[VideoDetails] = None

    @property
    def total_comments(self) -> int:
        return sum(cluster.size for cluster in self.clusters)

    def to_dict(self) -> Dict[str, Any]:
        """Render the JSON shape consumed by the presentation layer"""
        result = {
            "clusters": [cluster.to_dict() for cluster in self.clusters],
            "diversityScore": self.diversity_score,
            "biasMetrics": self.bias_metrics.to_dict(),
            "summary": self.summary,
        }
        if self.video is not None:
            result.update({
                "videoId": self.video.video_id,
                "title": self.video.title,
                "channelTitle": self.video.channel_title,
            })
        return result
