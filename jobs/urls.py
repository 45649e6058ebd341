# jobs/urls.py
from django.urls import path
from . import views

app_name = 'jobs'

urlpatterns = [
    path('dashboard/', views.dashboard, name='dashboard'),              # /job-seeker/dashboard/

    # job listing / detail / apply
    path('jobs/', views.job_list, name='job_list'),
    path('jobs/<int:job_id>/apply/', views.apply, name='apply'),
    path('jobs/<int:job_id>/', views.job_detail, name='job_detail'),

    # applications
    path('applications/', views.applications, name='applications'),
    path('applications/<int:application_id>/', views.application_detail, name='application_detail'),

    # profile / CVs
    path('profile/', views.profile, name='profile'),
    path('cv-manager/', views.cv_manager, name='cv_manager'),
    path('cv-builder/', views.cv_builder, name='cv_builder'),
    path('cvs/<int:cv_id>/download/', views.cv_download, name='cv_download'),

    path('settings/', views.settings_view, name='settings'),
]
