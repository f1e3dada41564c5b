"""
URL configuration for the tasks app.
"""

from django.urls import path
from . import views

urlpatterns = [
    path('', views.api_info, name='api-info'),
    path('health', views.health, name='health'),
    path('tasks', views.task_collection, name='task-collection'),
    path('tasks/<str:task_id>', views.task_detail, name='task-detail'),
    path('tasks/<str:task_id>/toggle', views.toggle_task, name='task-toggle'),
    # AI endpoints
    path('ai/suggestions', views.ai_suggestions, name='ai-suggestions'),
    path('ai/analytics', views.ai_analytics, name='ai-analytics'),
    path('ai/prioritize', views.ai_prioritize, name='ai-prioritize'),
]
