"""
URL configuration for the categories app.
"""

from django.urls import path
from . import views

urlpatterns = [
    path('categories', views.category_collection, name='category-collection'),
    path('categories/<str:category_id>', views.category_detail, name='category-detail'),
]
