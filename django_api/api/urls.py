"""
URL routing for API endpoints
"""
from django.urls import path
from . import views

urlpatterns = [
    path('analyze/', views.analyze_video_view, name='analyze-video'),
    path('analyze/comments/', views.analyze_comments_view, name='analyze-comments'),
]
