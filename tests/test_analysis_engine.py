"""
End-to-end tests for CommentAnalysisEngine with an in-memory vectorizer
"""
import json
import math
from unittest.mock import MagicMock

import pytest

from comment_analysis import analysis_engine
from comment_analysis.analysis_engine import FALLBACK_THEME, CommentAnalysisEngine, main
from comment_analysis.config import AnalysisConfig
from comment_analysis.models import BiasMetrics, Cluster, Comment, VideoDetails
from conftest import FakeVectorizer, make_comments


def assert_partition(result, comments):
    ids = sorted(c.id for cluster in result.clusters for c in cluster.comments)
    assert ids == sorted(c.id for c in comments)
    for cluster in result.clusters:
        assert cluster.size == len(cluster.comments) > 0


def test_two_clear_topics(orthogonal_vectorizer, orthogonal_comments):
    engine = CommentAnalysisEngine(orthogonal_vectorizer)

    result = engine.analyze(orthogonal_comments)

    assert_partition(result, orthogonal_comments)
    groups = {frozenset(c.id for c in cluster.comments) for cluster in result.clusters}
    assert groups == {frozenset({"c0", "c1"}), frozenset({"c2", "c3"})}

    by_theme = {cluster.theme: cluster for cluster in result.clusters}
    assert set(by_theme) == {"python decorators", "government policy"}
    assert by_theme["python decorators"].sentiment == pytest.approx(0.8)
    assert by_theme["government policy"].sentiment == pytest.approx(-0.6)
    assert by_theme["python decorators"].headline == "Great tutorial on python decorators"
    assert by_theme["government policy"].headline == "The government policy on taxes is wrong"

    assert result.diversity_score == pytest.approx(math.log(2) * 2 / 4)
    assert result.bias_metrics.political == pytest.approx(2 / 6)
    assert result.bias_metrics.moral == pytest.approx(1 / 6)
    assert result.summary == (
        "This video has 4 comments organized into 2 distinct viewpoints. "
        "The comment section shows low diversity of opinions, suggesting an echo chamber effect."
    )


def test_cluster_ids_follow_group_position(orthogonal_vectorizer, orthogonal_comments):
    result = CommentAnalysisEngine(orthogonal_vectorizer).analyze(orthogonal_comments)

    ids = {cluster.id: cluster.theme for cluster in result.clusters}
    assert ids == {"cluster-0": "government policy", "cluster-1": "python decorators"}


def test_political_discussion_with_small_talk():
    texts = ["The government policy on this is a disgrace"] * 15 + ["Nice video, thanks for sharing."] * 5
    vectorizer = FakeVectorizer(vectors={
        texts[0]: [0.0, 1.0],
        texts[-1]: [1.0, 0.0],
    })
    comments = make_comments(texts)

    result = CommentAnalysisEngine(vectorizer).analyze(comments)

    assert_partition(result, comments)
    assert sorted(cluster.size for cluster in result.clusters) == [5, 15]
    assert result.bias_metrics.political == pytest.approx(2 / 6)
    assert "politically charged" not in result.summary


def test_single_comment():
    comments = make_comments(["Only one opinion here"])
    vectorizer = FakeVectorizer(vectors={"Only one opinion here": [0.6, 0.8]}, polarities={"Only one opinion here": 0.3})

    result = CommentAnalysisEngine(vectorizer).analyze(comments)

    assert len(result.clusters) == 1
    assert result.clusters[0].size == 1
    assert result.clusters[0].headline == "Only one opinion here"
    assert result.clusters[0].sentiment == pytest.approx(0.3)
    assert result.diversity_score == 0.0
    assert result.summary.startswith("This video has 1 comments organized into 1 distinct viewpoints.")


def test_empty_batch():
    result = CommentAnalysisEngine(FakeVectorizer()).analyze([])

    assert result.clusters == []
    assert result.diversity_score == 0.0
    assert result.bias_metrics == BiasMetrics.neutral()
    assert result.summary == "There are no comments to analyze for this video."


def test_provider_outage_still_returns_valid_result():
    texts = ["first comment", "second comment", "third comment"]
    comments = make_comments(texts)
    vectorizer = FakeVectorizer(failing=set(texts))

    result = CommentAnalysisEngine(vectorizer).analyze(comments)

    assert_partition(result, comments)
    assert len(result.clusters) == 1
    assert result.clusters[0].sentiment == 0.0


def test_empty_comment_texts_are_kept():
    comments = [Comment(id="a", text=""), Comment(id="b", text="   "), Comment(id="c", text="real words here")]
    vectorizer = FakeVectorizer(vectors={"real words here": [1.0, 0.0]})

    result = CommentAnalysisEngine(vectorizer).analyze(comments)

    assert_partition(result, comments)
    assert "" not in vectorizer.embed_calls


class ShortVectorizer(FakeVectorizer):
    def embed_many(self, texts):
        return super().embed_many(texts)[:-1]


def test_clustering_stage_failure_falls_back_to_single_cluster(orthogonal_comments):
    result = CommentAnalysisEngine(ShortVectorizer()).analyze(orthogonal_comments)

    assert len(result.clusters) == 1
    cluster = result.clusters[0]
    assert cluster.id == "cluster-0"
    assert cluster.theme == FALLBACK_THEME
    assert cluster.sentiment == 0.0
    assert [c.id for c in cluster.comments] == ["c0", "c1", "c2", "c3"]
    assert result.diversity_score == 0.0


def test_bias_scorer_failure_is_neutral(orthogonal_vectorizer, orthogonal_comments):
    scorer = MagicMock()
    scorer.score.side_effect = RuntimeError("scorer exploded")

    result = CommentAnalysisEngine(orthogonal_vectorizer, bias_scorer=scorer).analyze(orthogonal_comments)

    assert result.bias_metrics == BiasMetrics.neutral()
    assert len(result.clusters) == 2


def test_rejects_non_comment_items():
    with pytest.raises(TypeError):
        CommentAnalysisEngine(FakeVectorizer()).analyze(["just a string"])


def test_analysis_is_deterministic(orthogonal_vectorizer, orthogonal_comments):
    engine = CommentAnalysisEngine(orthogonal_vectorizer)

    first = engine.analyze(orthogonal_comments).to_dict()
    second = engine.analyze(orthogonal_comments).to_dict()

    assert first == second


def cluster_of(size, index=0):
    comments = [Comment(id=f"{index}-{i}", text="x") for i in range(size)]
    return Cluster(id=f"cluster-{index}", theme="", headline="", comments=comments, sentiment=0.0, size=size)


def test_summary_mentions_bias_above_threshold():
    engine = CommentAnalysisEngine(FakeVectorizer())
    clusters = [cluster_of(2, 0), cluster_of(2, 1), cluster_of(2, 2)]

    summary = engine.generate_summary(clusters, BiasMetrics(political=0.6, emotional=0.5, moral=0.9), 0.8)

    assert summary == (
        "This video has 6 comments organized into 3 distinct viewpoints. "
        "The comment section shows high diversity of opinions. "
        "The discussion is politically charged. "
        "The discussion includes significant moral framing."
    )


def test_summary_moderate_tier():
    engine = CommentAnalysisEngine(FakeVectorizer())

    summary = engine.generate_summary([cluster_of(3)], BiasMetrics.neutral(), 0.5)

    assert summary.endswith("The comment section shows moderate diversity of opinions.")


def test_summary_thresholds_come_from_config():
    config = AnalysisConfig(bias_summary_threshold=0.1)
    engine = CommentAnalysisEngine(FakeVectorizer(), config=config)

    summary = engine.generate_summary([cluster_of(3)], BiasMetrics(emotional=0.2), 0.0)

    assert "The comments show strong emotional engagement." in summary


def test_analyze_video_uses_source(orthogonal_vectorizer, orthogonal_comments):
    source = MagicMock()
    source.get_video_details.return_value = VideoDetails("dQw4w9WgXcQ", "Title", "Channel")
    source.fetch_comments.return_value = orthogonal_comments

    result = CommentAnalysisEngine(orthogonal_vectorizer).analyze_video("dQw4w9WgXcQ", source)

    source.fetch_comments.assert_called_once_with("dQw4w9WgXcQ", 100)
    payload = result.to_dict()
    assert payload["videoId"] == "dQw4w9WgXcQ"
    assert payload["title"] == "Title"
    assert payload["channelTitle"] == "Channel"
    assert len(payload["clusters"]) == 2


def test_cli_analyzes_comments_file(tmp_path, monkeypatch, capsys, orthogonal_vectorizer, orthogonal_comments):
    comments_file = tmp_path / "comments.json"
    comments_file.write_text(json.dumps([c.to_dict() for c in orthogonal_comments]), encoding="utf-8")
    monkeypatch.setattr(analysis_engine, "build_vectorizer", lambda config: orthogonal_vectorizer)

    exit_code = main(["--comments-file", str(comments_file)])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert set(payload) == {"clusters", "diversityScore", "biasMetrics", "summary"}
    assert len(payload["clusters"]) == 2
    assert payload["clusters"][0]["comments"][0]["likeCount"] == 2


def test_cli_rejects_bad_video_url(monkeypatch):
    monkeypatch.setattr(analysis_engine, "build_vectorizer", lambda config: FakeVectorizer())

    assert main(["--video", "https://example.com/not-a-video"]) == 2


def test_cli_missing_comments_file(tmp_path, monkeypatch):
    monkeypatch.setattr(analysis_engine, "build_vectorizer", lambda config: FakeVectorizer())

    assert main(["--comments-file", str(tmp_path / "missing.json")]) == 1
