"""
URL configuration for the accounts app.
"""

from django.urls import path
from . import views

urlpatterns = [
    path('auth/register', views.register, name='auth-register'),
    path('auth/login', views.login, name='auth-login'),
    path('auth/refresh', views.refresh, name='auth-refresh'),
    path('auth/logout', views.logout, name='auth-logout'),
    path('auth/profile', views.profile, name='auth-profile'),
]
