# jobsite/urls.py
from django.urls import include, path
from django.views.generic import TemplateView

from jobs import views as jobs_views

urlpatterns = [
    # Public
    path('', TemplateView.as_view(template_name='public/home.html'), name='home'),
    path('about/', TemplateView.as_view(template_name='public/about.html'), name='about'),

    # Auth, theme and role-neutral redirects (/login/, /dashboard/, ...)
    path('', include('accounts.urls')),

    # Role areas
    path('job-seeker/', include('jobs.urls')),
    path('employer/', include('employers.urls')),
    path('admin/', include('adminpanel.urls')),

    # AI assistant, available to every signed-in role
    path('assistant/chat/', jobs_views.assistant_chat, name='assistant_chat'),
]

handler404 = 'jobsite.views.page_not_found'
