# adminpanel/views.py
"""
Administrator pages: platform statistics, job moderation, employer
approval and user management.
"""
import logging

from django.contrib import messages
from django.http import HttpResponseBadRequest
from django.shortcuts import redirect, render
from django.utils.http import urlencode

from accounts.decorators import role_required
from accounts.roles import ADMIN, ROLE_LABELS, ROLES, map_backend_role
from api import administration as admin_api
from api import employers as employers_api
from api import jobs as jobs_api
from api import profile as profile_api
from api.client import ApiError, call_or_default, error_message, get_client
from api.dto import Employer, Job, User, many
from api.pagination import PageState

logger = logging.getLogger(__name__)

MODERATION_PAGE_SIZE = 10
MODERATION_FILTERS = ('PENDING', 'APPROVED', 'REJECTED', 'ALL')
DASHBOARD_REJECT_REASON = 'Rejected by administrator'
MODERATION_REJECT_REASON = 'No reason provided'

# backend role names used by /admin/users/role/{role}
BACKEND_ROLES = {
    'job_seeker': 'JOB_SEEKER',
    'employer': 'EMPLOYER',
    'admin': 'ADMIN',
}

admin_required = role_required(ADMIN)


def _items(data):
    if isinstance(data, dict):
        return data.get('content') or []
    return data or []


def _user(data):
    user = User.from_json(data)
    user.role = map_backend_role(user.role or (data or {}).get('roles'))
    return user


def _moderation_log(data):
    """Flatten a JobModerationLog payload for the history tables."""
    admin = data.get('admin') if isinstance(data.get('admin'), dict) else {}
    job = data.get('job') if isinstance(data.get('job'), dict) else {}
    return {
        'id': data.get('id'),
        'action': data.get('action') or '',
        'reason': data.get('reason') or '',
        'created_at': str(data.get('createdAt') or data.get('timestamp') or '')[:16],
        'moderator': admin.get('email') or data.get('adminEmail') or data.get('moderatorName') or '',
        'job_title': job.get('title') or data.get('jobTitle') or '',
    }


def _moderate_job(request, default_reason):
    """Approve or reject the job named in the POST body. Returns True on success."""
    action = request.POST.get('action')
    job_id = request.POST.get('job_id')
    client = get_client(request)
    try:
        if action == 'approve':
            admin_api.approve_job(client, job_id)
            messages.success(request, "Job approved.")
        elif action == 'reject':
            reason = (request.POST.get('reason') or '').strip() or default_reason
            admin_api.reject_job(client, job_id, reason)
            messages.success(request, "Job rejected.")
        else:
            return False
    except ApiError as e:
        messages.error(request, error_message(e, f"Failed to {action} job"))
    return True


# -------------------------
# Dashboard
# -------------------------
@admin_required
def dashboard(request):
    if request.method == 'POST':
        if not request.POST.get('job_id') or not _moderate_job(request, DASHBOARD_REJECT_REASON):
            return HttpResponseBadRequest("Unknown action")
        return redirect('adminpanel:dashboard')

    client = get_client(request)
    stats, stats_error = call_or_default(admin_api.get_statistics, client, default={},
                                         error_text="Failed to load statistics")
    pending, _ = call_or_default(admin_api.get_pending_jobs, client, default=[])
    return render(request, 'adminpanel/dashboard.html', {
        'stats': stats or {},
        'pending_jobs': many(Job, _items(pending)),
        'error': stats_error,
    })


# -------------------------
# Job moderation
# -------------------------
@admin_required
def jobs(request):
    status = request.GET.get('status', 'PENDING').upper()
    if status not in MODERATION_FILTERS:
        status = 'PENDING'
    try:
        current_page = max(int(request.GET.get('page', 1)), 1)
    except (TypeError, ValueError):
        current_page = 1

    if request.method == 'POST':
        if not request.POST.get('job_id') or not _moderate_job(request, MODERATION_REJECT_REASON):
            return HttpResponseBadRequest("Unknown action")
        return redirect(f"{request.path}?status={status}&page={current_page}")

    error = None
    try:
        # the page selector is 1-based, the backend is 0-based
        data = admin_api.get_jobs_by_status(get_client(request), status, {
            'page': current_page - 1,
            'size': MODERATION_PAGE_SIZE,
        })
        page_state = PageState.from_response(data, default_size=MODERATION_PAGE_SIZE).map(Job.from_json)
    except ApiError as e:
        error = error_message(e, "Failed to load opportunities for moderation")
        page_state = PageState([], page=current_page - 1, size=MODERATION_PAGE_SIZE)

    return render(request, 'adminpanel/jobs.html', {
        'page_state': page_state,
        'jobs': page_state.items,
        'status': status,
        'filters': MODERATION_FILTERS,
        'base_query': urlencode({'status': status}),
        'error': error,
    })


@admin_required
def job_logs(request, job_id):
    client = get_client(request)
    job, _ = call_or_default(jobs_api.get_by_id, client, job_id, default=None)
    logs, error = call_or_default(admin_api.get_job_moderation_logs, client, job_id, default=[],
                                  error_text="Failed to load moderation history")
    return render(request, 'adminpanel/job_logs.html', {
        'job': Job.from_json(job) if job else None,
        'job_id': job_id,
        'logs': [_moderation_log(log) for log in _items(logs) if isinstance(log, dict)],
        'error': error,
    })


# -------------------------
# Employers
# -------------------------
@admin_required
def employers(request):
    client = get_client(request)
    if request.method == 'POST':
        action = request.POST.get('action')
        employer_id = request.POST.get('employer_id')
        if not employer_id or action not in ('approve', 'reject'):
            return HttpResponseBadRequest("Unknown action")
        try:
            if action == 'approve':
                admin_api.approve_employer(client, employer_id)
                messages.success(request, "Employer approved successfully")
            else:
                admin_api.reject_employer(client, employer_id, (request.POST.get('reason') or '').strip())
                messages.success(request, "Employer rejected successfully")
        except ApiError as e:
            messages.error(request, error_message(e, f"Failed to {action} employer"))
        return redirect('adminpanel:employers')

    query = request.GET.get('q', '').strip()
    view = request.GET.get('view', 'pending')
    try:
        if query:
            data = admin_api.search_employers(client, query)
        elif view == 'approved':
            data = admin_api.get_approved_employers(client)
        elif view == 'all':
            data = admin_api.get_all_employers(client)
        else:
            view = 'pending'
            data = admin_api.get_pending_employers(client)
        employer_list = many(Employer, _items(data))
        error = None
    except ApiError as e:
        employer_list = []
        error = error_message(e, "Failed to load employers")
    return render(request, 'adminpanel/employers.html', {
        'employers': employer_list,
        'query': query,
        'view': view,
        'error': error,
    })


# -------------------------
# Users
# -------------------------
@admin_required
def users(request):
    client = get_client(request)
    search = request.GET.get('search', '').strip()
    role = request.GET.get('role', '').strip()

    if request.method == 'POST':
        action = request.POST.get('action')
        user_id = request.POST.get('user_id')
        handlers = {
            'activate': admin_api.activate_user,
            'deactivate': admin_api.deactivate_user,
            'delete': admin_api.delete_user,
        }
        if not user_id or action not in handlers:
            return HttpResponseBadRequest("Unknown action")
        try:
            handlers[action](client, user_id)
            messages.success(request, f"User {action}d.")
        except ApiError as e:
            messages.error(request, error_message(e, f"Failed to {action} user"))
        return redirect(request.get_full_path())

    try:
        if search:
            data = admin_api.search_users(client, search)
        elif role in BACKEND_ROLES:
            data = admin_api.get_users_by_role(client, BACKEND_ROLES[role])
        else:
            data = admin_api.get_all_users(client)
        user_list = [_user(u) for u in _items(data)]
        error = None
    except ApiError as e:
        user_list = []
        error = error_message(e, "Failed to load users")
    return render(request, 'adminpanel/users.html', {
        'users': user_list,
        'search': search,
        'role': role,
        'roles': [(r, ROLE_LABELS[r]) for r in ROLES],
        'error': error,
    })


@admin_required
def user_detail(request, user_id):
    client = get_client(request)
    if request.method == 'POST':
        try:
            if request.POST.get('is_active') == '1':
                admin_api.deactivate_user(client, user_id)
                messages.success(request, "User banned.")
            else:
                admin_api.activate_user(client, user_id)
                messages.success(request, "User unbanned.")
        except ApiError as e:
            messages.error(request, error_message(e, "Failed to update user"))
        return redirect('adminpanel:user_detail', user_id=user_id)

    try:
        user = _user(admin_api.get_user_by_id(client, user_id))
    except ApiError as e:
        return render(request, 'adminpanel/user_detail.html', {'error': error_message(e, "Failed to load user")})
    return render(request, 'adminpanel/user_detail.html', {
        'user': user,
        'role_label': ROLE_LABELS.get(user.role, user.role or ''),
    })


# -------------------------
# Analytics / profile
# -------------------------
@admin_required
def analytics(request):
    client = get_client(request)
    job_stats, _ = call_or_default(jobs_api.get_statistics, client, default={})
    platform_stats, _ = call_or_default(admin_api.get_statistics, client, default={})
    employer_stats, _ = call_or_default(employers_api.get_statistics, client, default={})
    recent, recent_error = call_or_default(jobs_api.get_all, client,
                                           {'page': 0, 'size': 5, 'sort': 'createdAt,desc'},
                                           default=[], error_text="Failed to load recent jobs")
    job_stats = job_stats or {}
    platform_stats = platform_stats or {}
    employer_stats = employer_stats or {}
    summary = {
        'total_users': platform_stats.get('totalUsers', job_stats.get('totalUsers')),
        'active_jobs': job_stats.get('activeJobs', job_stats.get('active', 0)),
        'applications': job_stats.get('totalApplications', job_stats.get('applications', 0)),
        'new_companies': employer_stats.get('newCompanies', employer_stats.get('newEmployers', 0)),
    }
    return render(request, 'adminpanel/analytics.html', {
        'summary': summary,
        'job_stats': job_stats,
        'platform_stats': platform_stats,
        'recent_jobs': many(Job, _items(recent)),
        'error': recent_error,
    })


@admin_required
def profile(request):
    client = get_client(request)
    data, error = call_or_default(profile_api.get_profile, client, default=None,
                                  error_text="Failed to load profile")
    logs, logs_error = call_or_default(admin_api.get_all_moderation_logs, client, default=[],
                                       error_text="Failed to load moderation logs")
    logs = [_moderation_log(log) for log in _items(logs) if isinstance(log, dict)]
    return render(request, 'adminpanel/profile.html', {
        'admin': data or request.auth.user or {},
        'logs': logs,
        'stats': {
            'approvals': sum(1 for log in logs if log.get('action') == 'APPROVED'),
            'rejections': sum(1 for log in logs if log.get('action') == 'REJECTED'),
            'total': len(logs),
        },
        'error': error or logs_error,
    })
