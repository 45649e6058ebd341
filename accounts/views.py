# accounts/views.py
import logging

from django.conf import settings
from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from api import auth as auth_api
from api.client import ApiError, error_message, get_client

from .context_processors import THEME_SESSION_KEY, current_theme
from .decorators import guest_only, login_required
from .forms import ForgotPasswordForm, LoginForm, RegisterForm
from .roles import dashboard_route, role_redirect_path

logger = logging.getLogger(__name__)


def _start_session(request, token):
    """Store the token and load the user. Returns the user or None."""
    user = request.auth.login(token)
    if not user:
        request.auth.clear()
    return user


@guest_only
def login_view(request):
    if request.method == 'POST':
        form = LoginForm(request.POST)
        if form.is_valid():
            email = form.cleaned_data['email']
            try:
                payload = auth_api.login(get_client(request), email, form.cleaned_data['password'])
            except ApiError as e:
                logger.info("Login failed for %s: %s", email, e)
                form.add_error(None, error_message(e, "Login failed. Please check your credentials."))
            else:
                token = auth_api.extract_token(payload)
                user = _start_session(request, token) if token else None
                if user:
                    if form.cleaned_data.get('remember_me'):
                        request.session.set_expiry(settings.SESSION_COOKIE_AGE)
                    else:
                        request.session.set_expiry(0)
                    messages.success(request, f"Welcome back, {user.get('name') or user.get('email')}!")
                    return redirect(dashboard_route(user.get('role')))
                form.add_error(None, "Login failed. Please try again.")
    else:
        form = LoginForm()
    return render(request, 'accounts/login.html', {'form': form})


@guest_only
def register(request):
    if request.method == 'POST':
        form = RegisterForm(request.POST)
        if form.is_valid():
            try:
                payload = auth_api.register(get_client(request), form.to_payload())
            except ApiError as e:
                form.add_error(None, error_message(e, "Registration failed. Please try again."))
            else:
                token = auth_api.extract_token(payload)
                user = _start_session(request, token) if token else None
                if user:
                    messages.success(request, "Account created successfully.")
                    return redirect(dashboard_route(user.get('role')))
                messages.success(request, "Registration successful. Please sign in.")
                return redirect('accounts:login')
    else:
        form = RegisterForm(initial={'role': request.GET.get('role', 'JOB_SEEKER').upper()})
    return render(request, 'accounts/register.html', {'form': form})


@guest_only
def forgot_password(request):
    sent = False
    if request.method == 'POST':
        form = ForgotPasswordForm(request.POST)
        if form.is_valid():
            try:
                auth_api.forgot_password(get_client(request), form.cleaned_data['email'])
            except ApiError as e:
                form.add_error(None, error_message(e, "Failed to process request. Please try again."))
            else:
                sent = True
                messages.success(
                    request,
                    "If an account exists with this email, you will receive password reset instructions.",
                )
    else:
        form = ForgotPasswordForm()
    return render(request, 'accounts/forgot_password.html', {'form': form, 'sent': sent})


@require_POST
def logout_view(request):
    request.auth.logout()
    messages.info(request, "You have been signed out.")
    return redirect('accounts:login')


@login_required
def role_redirect(request, target):
    """/dashboard/, /profile/, ... -> the same page under the visitor's role prefix."""
    return redirect(role_redirect_path(request.auth.role, target))


@require_POST
def toggle_theme(request):
    request.session[THEME_SESSION_KEY] = 'light' if current_theme(request) == 'dark' else 'dark'
    next_url = request.POST.get('next') or request.META.get('HTTP_REFERER') or '/'
    if not url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        next_url = '/'
    return redirect(next_url)
