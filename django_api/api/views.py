"""
API views for comment section analysis
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from comment_analysis.exceptions import (
    CommentSourceError,
    ConfigurationError,
    VideoNotFoundError,
)
from comment_analysis.models import Comment
from comment_analysis.youtube import extract_video_id
from .serializers import AnalyzeCommentsSerializer, AnalyzeVideoSerializer
from .utils import get_comment_source, get_engine

logger = logging.getLogger(__name__)


@api_view(['POST'])
def analyze_video_view(request):
    """
    Fetch a video's comments and analyze the discussion (synchronous)

    POST /api/analyze/
    Body: {"url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ", "max_results": 100}
    """
    serializer = AnalyzeVideoSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    video_id = extract_video_id(serializer.validated_data['url'])
    if not video_id:
        return Response(
            {'error': 'Invalid YouTube URL'},
            status=status.HTTP_400_BAD_REQUEST
        )

    try:
        result = get_engine().analyze_video(
            video_id,
            get_comment_source(),
            serializer.validated_data.get('max_results')
        )
    except VideoNotFoundError as e:
        return Response({
            'video_id': video_id,
            'error': str(e)
        }, status=status.HTTP_404_NOT_FOUND)
    except CommentSourceError as e:
        logger.error(f"Comment source failed for {video_id}: {e}")
        return Response({
            'video_id': video_id,
            'error': 'Failed to fetch comments for this video'
        }, status=status.HTTP_502_BAD_GATEWAY)
    except ConfigurationError as e:
        logger.error(f"Analysis is misconfigured: {e}")
        return Response({
            'error': 'Analysis service is not configured'
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(result.to_dict(), status=status.HTTP_200_OK)


@api_view(['POST'])
def analyze_comments_view(request):
    """
    Analyze a batch of comments supplied by the caller

    POST /api/analyze/comments/
    Body: {"comments": [{"id": "c1", "text": "...", "author": "...", "likeCount": 3, "publishedAt": "..."}]}
    """
    serializer = AnalyzeCommentsSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    comments = [
        Comment.from_dict(item, default_id=idx)
        for idx, item in enumerate(serializer.validated_data['comments'])
    ]

    try:
        result = get_engine().analyze(comments)
    except ConfigurationError as e:
        logger.error(f"Analysis is misconfigured: {e}")
        return Response({
            'error': 'Analysis service is not configured'
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(result.to_dict(), status=status.HTTP_200_OK)
