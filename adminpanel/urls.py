# adminpanel/urls.py
from django.urls import path
from . import views

app_name = 'adminpanel'

urlpatterns = [
    path('dashboard/', views.dashboard, name='dashboard'),              # /admin/dashboard/
    path('users/', views.users, name='users'),
    path('users/<int:user_id>/', views.user_detail, name='user_detail'),
    path('employers/', views.employers, name='employers'),
    path('jobs/', views.jobs, name='jobs'),
    path('jobs/<int:job_id>/logs/', views.job_logs, name='job_logs'),
    path('analytics/', views.analytics, name='analytics'),
    path('profile/', views.profile, name='profile'),
]
