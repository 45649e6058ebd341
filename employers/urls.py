# employers/urls.py
from django.urls import path
from . import views

app_name = 'employers'

urlpatterns = [
    path('dashboard/', views.dashboard, name='dashboard'),              # /employer/dashboard/

    # job CRUD
    path('jobs/', views.my_jobs, name='my_jobs'),
    path('jobs/post/', views.post_job, name='post_job'),
    path('jobs/<int:job_id>/edit/', views.edit_job, name='edit_job'),
    path('jobs/<int:job_id>/analytics/', views.job_analytics, name='job_analytics'),

    # received applications
    path('applications/', views.applications, name='applications'),
    path('applications/<int:application_id>/', views.application_detail, name='application_detail'),

    path('company-profile/', views.company_profile, name='company_profile'),
    path('verification/', views.verification, name='verification'),
    path('settings/', views.settings_view, name='settings'),
]
