"""
Serializers for API requests
"""
from django.conf import settings
from rest_framework import serializers


class AnalyzeVideoSerializer(serializers.Serializer):
    url = serializers.CharField(
        required=True,
        help_text="YouTube video URL or ID"
    )
    max_results = serializers.IntegerField(
        required=False,
        min_value=1,
        help_text="Maximum number of comments to analyze"
    )

    def validate_max_results(self, value):
        if value > settings.MAX_COMMENTS_PER_REQUEST:
            raise serializers.ValidationError(
                f"max_results cannot exceed {settings.MAX_COMMENTS_PER_REQUEST}"
            )
        return value


class CommentSerializer(serializers.Serializer):
    id = serializers.CharField(required=False, allow_null=True, default=None)
    text = serializers.CharField(required=False, allow_blank=True, allow_null=True,
                                 trim_whitespace=False, default="")
    author = serializers.CharField(required=False, allow_blank=True, default="")
    likeCount = serializers.IntegerField(required=False, min_value=0, default=0)
    publishedAt = serializers.CharField(required=False, allow_blank=True, default="")


class AnalyzeCommentsSerializer(serializers.Serializer):
    comments = CommentSerializer(many=True, allow_empty=True)

    def validate_comments(self, value):
        if len(value) > settings.MAX_COMMENTS_PER_REQUEST:
            raise serializers.ValidationError(
                f"Cannot analyze more than {settings.MAX_COMMENTS_PER_REQUEST} comments per request"
            )
        return value
