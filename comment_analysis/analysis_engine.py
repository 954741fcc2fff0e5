"""
Comment discussion analysis engine.

Groups a video's comments into thematic clusters, scores sentiment per
cluster, measures keyword bias across the whole discussion and summarises how
diverse or echo-chamber-like the comment section is.
"""
import argparse
import json
import logging
import sys
from typing import List, Optional, Sequence

from .bias import KeywordBiasScorer
from .clustering import choose_cluster_count, cluster_with_fallback
from .comments_io import load_comments_from_file
from .config import AnalysisConfig
from .diversity import diversity_tier, score_diversity
from .exceptions import CommentAnalysisError
from .models import AnalysisResult, BiasMetrics, Cluster, Comment, VideoDetails
from .themes import extract_theme
from .vectorizer import Vectorizer, build_vectorizer
from .youtube import YouTubeCommentSource, extract_video_id

logger = logging.getLogger(__name__)

FALLBACK_THEME = "General Discussion"

DIVERSITY_SENTENCES = {
    "high": "The comment section shows high diversity of opinions.",
    "moderate": "The comment section shows moderate diversity of opinions.",
    "low": "The comment section shows low diversity of opinions, suggesting an echo chamber effect.",
}

BIAS_SENTENCES = (
    ("political", "The discussion is politically charged."),
    ("emotional", "The comments show strong emotional engagement."),
    ("moral", "The discussion includes significant moral framing."),
)


class CommentAnalysisEngine:
    """
    Comment Discussion & Diversity Analysis Engine
    """

    def __init__(self, vectorizer: Vectorizer,
                 config: Optional[AnalysisConfig] = None,
                 bias_scorer=None):
        self.vectorizer = vectorizer
        self.config = config or AnalysisConfig()
        self.bias_scorer = bias_scorer or KeywordBiasScorer()

    def analyze(self, comments: Sequence[Comment],
                video: Optional[VideoDetails] = None) -> AnalysisResult:
        """
        Analyze one batch of comments.

        Never raises for data-quality reasons: provider failures degrade inside
        the vectorizer, clustering failures degrade to a single cluster, and an
        empty batch yields an empty result.

        Raises:
            TypeError: an element of ``comments`` is not a Comment
        """
        comments = list(comments)
        for comment in comments:
            if not isinstance(comment, Comment):
                raise TypeError(f"Expected Comment instances, got {type(comment).__name__}")

        if not comments:
            logger.info("No comments to analyze")
            return AnalysisResult(
                clusters=[],
                diversity_score=0.0,
                bias_metrics=BiasMetrics.neutral(),
                summary=self.generate_summary([], BiasMetrics.neutral(), 0.0),
                video=video,
            )

        logger.info(f"Analyzing {len(comments)} comments...")
        texts = [comment.text for comment in comments]

        try:
            clusters = self._build_clusters(comments, texts)
        except Exception as e:
            logger.error(f"Cluster analysis failed ({e}); returning a single cluster")
            clusters = [self._fallback_cluster(comments)]

        bias_metrics = self._score_bias(texts)
        diversity_score = score_diversity(clusters)
        summary = self.generate_summary(clusters, bias_metrics, diversity_score)

        logger.info(f"Analysis complete: {len(clusters)} clusters, diversity {diversity_score:.3f}")
        return AnalysisResult(
            clusters=clusters,
            diversity_score=diversity_score,
            bias_metrics=bias_metrics,
            summary=summary,
            video=video,
        )

    def analyze_video(self, video_id: str, source, max_results: Optional[int] = None) -> AnalysisResult:
        """Fetch a video's details and comments from ``source`` and analyze them"""
        max_results = max_results or self.config.default_max_results
        video = source.get_video_details(video_id)
        comments = source.fetch_comments(video_id, max_results)
        return self.analyze(comments, video=video)

    def _build_clusters(self, comments: List[Comment], texts: List[str]) -> List[Cluster]:
        embeddings = self.vectorizer.embed_many(texts)
        if len(embeddings) != len(comments):
            raise CommentAnalysisError(
                f"Vectorizer returned {len(embeddings)} embeddings for {len(comments)} comments"
            )

        k = choose_cluster_count(len(comments), self.config)
        groups = cluster_with_fallback(embeddings, k, self.config.max_iterations)
        logger.info(f"Clustered {len(comments)} comments into k={k} groups: {[len(g) for g in groups]}")

        clusters = []
        for group_index, group in enumerate(groups):
            if not group:
                continue

            cluster_comments = [comments[i] for i in group]
            cluster_texts = [texts[i] for i in group]
            cluster_embeddings = [embeddings[i] for i in group]

            sentiments = self.vectorizer.sentiment_many(cluster_texts)
            sentiment = sum(sentiments) / len(sentiments) if sentiments else 0.0

            theme = extract_theme(cluster_texts, cluster_embeddings)

            clusters.append(Cluster(
                id=f"cluster-{group_index}",
                theme=theme.key_phrase,
                headline=theme.headline,
                comments=cluster_comments,
                sentiment=sentiment,
                size=len(cluster_comments),
            ))

        self._check_partition(groups, len(comments))
        return clusters

    @staticmethod
    def _check_partition(groups: List[List[int]], n: int):
        assigned = sorted(i for group in groups for i in group)
        if assigned != list(range(n)):
            raise CommentAnalysisError("Clusters do not cover every comment exactly once")

    @staticmethod
    def _fallback_cluster(comments: List[Comment]) -> Cluster:
        return Cluster(
            id="cluster-0",
            theme=FALLBACK_THEME,
            headline=comments[0].text if comments else "",
            comments=list(comments),
            sentiment=0.0,
            size=len(comments),
        )

    def _score_bias(self, texts: List[str]) -> BiasMetrics:
        try:
            return self.bias_scorer.score(texts)
        except Exception as e:
            logger.warning(f"Bias scoring failed ({e}); using neutral bias metrics")
            return BiasMetrics.neutral()

    def generate_summary(self, clusters: List[Cluster], bias_metrics: BiasMetrics,
                         diversity_score: float) -> str:
        """Render a plain-language summary from the diversity tier and bias thresholds"""
        total_comments = sum(cluster.size for cluster in clusters)
        if total_comments == 0:
            return "There are no comments to analyze for this video."

        sentences = [
            f"This video has {total_comments} comments organized into {len(clusters)} distinct viewpoints.",
            DIVERSITY_SENTENCES[diversity_tier(diversity_score, self.config)],
        ]

        threshold = self.config.bias_summary_threshold
        for field_name, sentence in BIAS_SENTENCES:
            if getattr(bias_metrics, field_name) > threshold:
                sentences.append(sentence)

        return " ".join(sentences)


def main(argv: Optional[List[str]] = None) -> int:
    """Analyze a video's comments (or a local comments file) and print the result JSON"""
    parser = argparse.ArgumentParser(description="Cluster and score a video's comment section")
    source_group = parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument("--video", help="YouTube video URL or ID")
    source_group.add_argument("--comments-file", help="JSON file of comments (string or object array)")
    parser.add_argument("--max-results", type=int, default=None, help="Maximum comments to fetch")
    parser.add_argument("--backend", choices=["local", "remote"], default=None,
                        help="Vectorizer backend (default: VECTORIZER_BACKEND or local)")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )

    overrides = {"vectorizer_backend": args.backend} if args.backend else {}
    try:
        config = AnalysisConfig.from_env(**overrides)
        engine = CommentAnalysisEngine(build_vectorizer(config), config=config)

        if args.comments_file:
            result = engine.analyze(load_comments_from_file(args.comments_file))
        else:
            video_id = extract_video_id(args.video)
            if not video_id:
                logger.error(f"Could not find a video ID in '{args.video}'")
                return 2
            source = YouTubeCommentSource(api_key=config.youtube_api_key)
            result = engine.analyze_video(video_id, source, args.max_results)
    except (CommentAnalysisError, OSError, ValueError) as e:
        logger.error(f"Analysis failed: {e}")
        return 1

    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
