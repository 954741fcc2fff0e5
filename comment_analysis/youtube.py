"""
YouTube Data API v3 comment source and video lookup
"""
import logging
import re
from typing import Any, Dict, List, Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .exceptions import CommentSourceError, ConfigurationError, VideoNotFoundError
from .models import Comment, VideoDetails

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100

_VIDEO_ID = re.compile(r'^[a-zA-Z0-9_-]{11}$')
_URL_PATTERNS = [
    re.compile(r'(?:youtube\.com/watch\?(?:.*&)?v=|youtu\.be/)([a-zA-Z0-9_-]{11})'),
    re.compile(r'youtube\.com/embed/([a-zA-Z0-9_-]{11})'),
    re.compile(r'youtube\.com/v/([a-zA-Z0-9_-]{11})'),
    re.compile(r'youtube\.com/shorts/([a-zA-Z0-9_-]{11})'),
]


def extract_video_id(url_or_id: Optional[str]) -> Optional[str]:
    """Extract the video ID from a YouTube URL, or accept a bare 11-character ID"""
    if not url_or_id:
        return None

    url_or_id = url_or_id.strip()
    if _VIDEO_ID.match(url_or_id):
        return url_or_id

    for pattern in _URL_PATTERNS:
        match = pattern.search(url_or_id)
        if match:
            return match.group(1)

    return None


def parse_comment_thread(item: Dict[str, Any]) -> Optional[Comment]:
    """Turn one commentThreads item into a Comment; None if it has no top-level comment"""
    snippet = item.get("snippet", {}).get("topLevelComment", {}).get("snippet")
    if snippet is None:
        return None

    text = snippet.get("textDisplay")
    if text is None:
        text = snippet.get("textOriginal")

    return Comment.from_dict({
        "id": item.get("id"),
        "text": text,
        "author": snippet.get("authorDisplayName"),
        "likeCount": snippet.get("likeCount"),
        "publishedAt": snippet.get("publishedAt"),
    })


class YouTubeCommentSource:
    def __init__(self, api_key: Optional[str] = None, client: Any = None):
        """
        Args:
            api_key: YouTube Data API key, required unless a client is given
            client: a prebuilt ``youtube`` v3 resource (used by tests)
        """
        if client is None:
            if not api_key:
                raise ConfigurationError("YOUTUBE_API_KEY is required to fetch comments")
            client = build("youtube", "v3", developerKey=api_key, cache_discovery=False)
        self.youtube = client

    def get_video_details(self, video_id: str) -> VideoDetails:
        try:
            response = self.youtube.videos().list(part="snippet", id=video_id).execute()
        except HttpError as e:
            raise CommentSourceError(f"Failed to fetch video details for {video_id}: {e}") from e

        items = response.get("items") or []
        if not items:
            raise VideoNotFoundError(f"Video {video_id} not found")

        snippet = items[0].get("snippet", {})
        return VideoDetails(
            video_id=video_id,
            title=snippet.get("title", ""),
            channel_title=snippet.get("channelTitle", ""),
        )

    def fetch_comments(self, video_id: str, max_results: int = 100) -> List[Comment]:
        """
        Fetch up to ``max_results`` top-level comments, following pagination.

        Raises:
            VideoNotFoundError: the video does not exist
            CommentSourceError: any other API failure (quota, disabled comments)
        """
        logger.info(f"Fetching up to {max_results} comments for video {video_id}")
        comments: List[Comment] = []
        page_token = None

        try:
            while len(comments) < max_results:
                params = {
                    "part": "snippet",
                    "videoId": video_id,
                    "maxResults": min(max_results - len(comments), MAX_PAGE_SIZE),
                    "textFormat": "plainText",
                }
                if page_token:
                    params["pageToken"] = page_token

                response = self.youtube.commentThreads().list(**params).execute()

                for item in response.get("items", []):
                    comment = parse_comment_thread(item)
                    if comment is not None:
                        comments.append(comment)

                page_token = response.get("nextPageToken")
                if not page_token:
                    break
        except HttpError as e:
            if e.resp.status == 404:
                raise VideoNotFoundError(f"Video {video_id} not found") from e
            raise CommentSourceError(f"Failed to fetch comments for {video_id}: {e}") from e

        logger.info(f"Fetched {len(comments[:max_results])} comments for video {video_id}")
        return comments[:max_results]
