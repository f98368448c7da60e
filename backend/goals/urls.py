"""
URL configuration for the goals app.
"""

from django.urls import path
from . import views

urlpatterns = [
    path('goals', views.goal_collection, name='goal-collection'),
    path('goals/stats', views.goal_stats, name='goal-stats'),
    path('goals/<str:goal_id>', views.goal_detail, name='goal-detail'),
]
