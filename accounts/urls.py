# accounts/urls.py
from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    path('login/', views.login_view, name='login'),
    path('register/', views.register, name='register'),
    path('forgot-password/', views.forgot_password, name='forgot_password'),
    path('logout/', views.logout_view, name='logout'),
    path('theme/toggle/', views.toggle_theme, name='toggle_theme'),

    # role-neutral entry points, resolved against the signed-in role
    path('dashboard/', views.role_redirect, {'target': 'dashboard'}, name='dashboard'),
    path('profile/', views.role_redirect, {'target': 'profile'}, name='profile'),
    path('settings/', views.role_redirect, {'target': 'settings'}, name='settings'),
    path('applications/', views.role_redirect, {'target': 'applications'}, name='applications'),
]
