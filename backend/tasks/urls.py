"""
URL configuration for the tasks app.
"""

from django.urls import path
from . import views

urlpatterns = [
    path('tasks', views.task_collection, name='task-collection'),
    # Fixed routes before the id route
    path('tasks/stats', views.task_stats, name='task-stats'),
    path('tasks/completed/bulk', views.delete_completed_tasks, name='task-delete-completed'),
    path('tasks/<str:task_id>', views.task_detail, name='task-detail'),
]
