# jobs/views.py
"""
Job-seeker pages. Every view renders from fresh backend calls; nothing is
cached between requests.
"""
import json
import logging

from django.contrib import messages
from django.http import HttpResponse, HttpResponseBadRequest, JsonResponse
from django.shortcuts import redirect, render
from django.utils.http import urlencode
from django.views.decorators.http import require_POST

from accounts.decorators import login_required, role_required
from accounts.forms import ChangePasswordForm
from accounts.roles import JOB_SEEKER
from api import ai as ai_api
from api import applications as applications_api
from api import auth as auth_api
from api import cvs as cvs_api
from api import jobs as jobs_api
from api import profile as profile_api
from api import users as users_api
from api.client import ApiError, call_or_default, error_message, get_client
from api.dto import APPLICATION_STATUSES, CV, Application, Job, many
from api.pagination import PageState

from .forms import (
    AccountSettingsForm,
    ApplyForm,
    CVBuilderForm,
    CVMetadataForm,
    CVUploadForm,
    JobSeekerProfileForm,
)
from .utils import cv_filename, render_to_pdf

logger = logging.getLogger(__name__)

JOB_LIST_PAGE_SIZE = 12
SIMILAR_JOBS_LIMIT = 3
RECOMMENDED_JOBS_LIMIT = 4
RECENT_APPLICATIONS_LIMIT = 5

job_seeker_required = role_required(JOB_SEEKER)


def _items(data):
    """Plain list out of either a list payload or a Spring page."""
    if isinstance(data, dict):
        return data.get('content') or []
    return data or []


def _page_param(request):
    try:
        return max(int(request.GET.get('page', 0)), 0)
    except (TypeError, ValueError):
        return 0


def _default_cv_id(cvs):
    for cv in cvs:
        if cv.is_default:
            return cv.id
    return cvs[0].id if cvs else None


# -------------------------
# Dashboard
# -------------------------
@job_seeker_required
def dashboard(request):
    client = get_client(request)
    # independent fetches: one failing must not blank the others
    apps, apps_error = call_or_default(applications_api.get_mine, client, default=[],
                                       error_text="Failed to load applications")
    jobs, jobs_error = call_or_default(jobs_api.get_all, client, {'page': 0, 'size': RECOMMENDED_JOBS_LIMIT},
                                       default=[], error_text="Failed to load jobs")
    stats, stats_error = call_or_default(profile_api.get_statistics, client, default=None,
                                         error_text="Failed to load statistics")
    return render(request, 'jobs/dashboard.html', {
        'applications': many(Application, _items(apps))[:RECENT_APPLICATIONS_LIMIT],
        'recommended': many(Job, _items(jobs))[:RECOMMENDED_JOBS_LIMIT],
        'stats': stats or {},
        'errors': [e for e in (apps_error, jobs_error, stats_error) if e],
    })


# -------------------------
# Jobs
# -------------------------
@job_seeker_required
def job_list(request):
    search = request.GET.get('search', '').strip()
    location = request.GET.get('location', '').strip()
    job_type = request.GET.get('type', '').strip()
    page = _page_param(request)

    params = {'page': page, 'size': JOB_LIST_PAGE_SIZE}
    client = get_client(request)
    error = None
    try:
        if search or location or job_type:
            params.update({'keyword': search, 'location': location, 'type': job_type})
            data = jobs_api.search(client, params)
        else:
            data = jobs_api.get_all(client, params)
        page_state = PageState.from_response(data, default_size=JOB_LIST_PAGE_SIZE).map(Job.from_json)
    except ApiError as e:
        error = error_message(e, "Failed to fetch jobs")
        page_state = PageState([], page=page, size=JOB_LIST_PAGE_SIZE)

    return render(request, 'jobs/job_list.html', {
        'page_state': page_state,
        'jobs': page_state.items,
        'search': search,
        'location': location,
        'type': job_type,
        'job_types': ('Full-time', 'Part-time', 'Contract'),
        'base_query': urlencode({k: v for k, v in (('search', search), ('location', location), ('type', job_type)) if v}),
        'error': error,
    })


@job_seeker_required
def job_detail(request, job_id):
    client = get_client(request)
    try:
        job = Job.from_json(jobs_api.get_by_id(client, job_id))
    except ApiError as e:
        return render(request, 'jobs/job_detail.html', {'error': error_message(e, "Failed to load job")})

    similar = []
    if job.title:
        data, _ = call_or_default(jobs_api.search, client, {'keyword': job.title, 'size': SIMILAR_JOBS_LIMIT},
                                  default=[])
        similar = [j for j in many(Job, _items(data)) if j.id != job.id][:SIMILAR_JOBS_LIMIT]

    match, _ = call_or_default(ai_api.get_match_score, client, job_id, default=None)
    return render(request, 'jobs/job_detail.html', {
        'job': job,
        'similar_jobs': similar,
        'match': match,
    })


@job_seeker_required
def apply(request, job_id):
    client = get_client(request)
    try:
        job = Job.from_json(jobs_api.get_by_id(client, job_id))
        cvs = many(CV, cvs_api.get_mine(client))
    except ApiError as e:
        messages.error(request, error_message(e, "Failed to load job details"))
        return redirect('jobs:job_list')

    if request.method != 'POST':
        form = ApplyForm(initial={'cv_id': _default_cv_id(cvs)})
        return render(request, 'jobs/apply.html', {'job': job, 'cvs': cvs, 'form': form})

    form = ApplyForm(request.POST, request.FILES)
    if not form.is_valid():
        return render(request, 'jobs/apply.html', {'job': job, 'cvs': cvs, 'form': form})

    cv_id = form.cleaned_data['cv_id']
    uploaded = form.cleaned_data.get('uploaded_cv')
    try:
        if uploaded:
            cv_id = (cvs_api.upload(client, uploaded) or {}).get('id')
        applications_api.create(client, {
            'jobId': job.id if job.id is not None else job_id,
            'cvId': cv_id,
            'coverLetter': form.cleaned_data.get('cover_letter') or '',
        })
    except ApiError as e:
        form.add_error(None, error_message(e, "Failed to submit application"))
        return render(request, 'jobs/apply.html', {'job': job, 'cvs': cvs, 'form': form})

    logger.info("Application submitted for job %s", job_id)
    messages.success(request, "Application submitted successfully!")
    return redirect('jobs:applications')


# -------------------------
# Applications
# -------------------------
@job_seeker_required
def applications(request):
    status = request.GET.get('status', '').strip().upper()
    error = None
    try:
        apps = many(Application, _items(applications_api.get_mine(get_client(request))))
    except ApiError as e:
        apps = []
        error = error_message(e, "Failed to load applications")
    if status:
        apps = [a for a in apps if (a.status or '').upper() == status]
    return render(request, 'jobs/applications.html', {
        'applications': apps,
        'status': status,
        'statuses': APPLICATION_STATUSES,
        'error': error,
    })


@job_seeker_required
def application_detail(request, application_id):
    client = get_client(request)
    if request.method == 'POST' and request.POST.get('action') == 'withdraw':
        try:
            applications_api.delete(client, application_id)
        except ApiError as e:
            messages.error(request, error_message(e, "Failed to withdraw application"))
            return redirect('jobs:application_detail', application_id=application_id)
        messages.success(request, "Application withdrawn.")
        return redirect('jobs:applications')

    try:
        application = Application.from_json(applications_api.get_by_id(client, application_id))
    except ApiError as e:
        return render(request, 'jobs/application_detail.html', {
            'error': error_message(e, "Failed to load application"),
        })
    return render(request, 'jobs/application_detail.html', {
        'application': application,
        'steps': APPLICATION_STATUSES[:4],
    })


# -------------------------
# Profile
# -------------------------
@job_seeker_required
def profile(request):
    client = get_client(request)
    analysis = None

    if request.method == 'POST' and request.POST.get('action') == 'analyze':
        try:
            analysis = ai_api.analyze_my_cv(client)
            messages.success(request, "AI Analysis complete!")
        except ApiError as e:
            logger.warning("CV analysis failed: %s", e)
            messages.error(request, "AI service is busy, please try again later.")
        form = None
    elif request.method == 'POST':
        form = JobSeekerProfileForm(request.POST)
        if form.is_valid():
            try:
                profile_api.update_job_seeker_profile(client, form.to_payload())
            except ApiError as e:
                messages.error(request, error_message(e, "Failed to update profile"))
            else:
                messages.success(request, "Profile updated successfully!")
                return redirect('jobs:profile')
    else:
        form = None

    data, error = call_or_default(profile_api.get_job_seeker_profile, client, default={},
                                  error_text="Failed to load profile data")
    stats, _ = call_or_default(profile_api.get_statistics, client, default={})
    if form is None:
        form = JobSeekerProfileForm(initial=JobSeekerProfileForm.initial_from(data))
    return render(request, 'jobs/profile.html', {
        'profile': data or {},
        'stats': stats or {},
        'form': form,
        'analysis': analysis,
        'error': error,
    })


# -------------------------
# CV manager
# -------------------------
@job_seeker_required
def cv_manager(request):
    client = get_client(request)
    upload_form = CVUploadForm()
    if request.method == 'POST':
        action = request.POST.get('action')
        cv_id = request.POST.get('cv_id')
        try:
            if action == 'upload':
                upload_form = CVUploadForm(request.POST, request.FILES)
                if upload_form.is_valid():
                    cvs_api.upload(client, upload_form.cleaned_data['file'])
                    messages.success(request, "CV uploaded successfully!")
                    return redirect('jobs:cv_manager')
            elif action == 'delete' and cv_id:
                cvs_api.delete(client, cv_id)
                messages.success(request, "CV deleted successfully")
                return redirect('jobs:cv_manager')
            elif action == 'default' and cv_id:
                cvs_api.set_default(client, cv_id)
                messages.success(request, "Default CV updated")
                return redirect('jobs:cv_manager')
            elif action == 'metadata' and cv_id:
                meta_form = CVMetadataForm(request.POST)
                if meta_form.is_valid():
                    cvs_api.update_metadata(client, cv_id, meta_form.cleaned_data)
                    messages.success(request, "Metadata updated successfully")
                else:
                    messages.error(request, "A title is required.")
                return redirect('jobs:cv_manager')
            else:
                return HttpResponseBadRequest("Unknown action")
        except ApiError as e:
            defaults = {
                'upload': "Failed to upload CV",
                'delete': "Failed to delete CV",
                'default': "Failed to set default CV",
                'metadata': "Failed to update metadata",
            }
            messages.error(request, error_message(e, defaults.get(action, "Request failed")))
            return redirect('jobs:cv_manager')

    data, error = call_or_default(cvs_api.get_mine, client, default=[], error_text="Failed to load CVs")
    return render(request, 'jobs/cv_manager.html', {
        'cvs': many(CV, data),
        'upload_form': upload_form,
        'error': error,
    })


@login_required
def cv_download(request, cv_id):
    """Streams a CV back from the backend; employers use it for applicants' CVs too."""
    try:
        content, filename, content_type = cvs_api.download(get_client(request), cv_id)
    except ApiError as e:
        messages.error(request, error_message(e, "Failed to download CV"))
        return redirect(request.META.get('HTTP_REFERER') or '/')
    response = HttpResponse(content, content_type=content_type)
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


# -------------------------
# CV builder
# -------------------------
@job_seeker_required
def cv_builder(request):
    if request.method != 'POST':
        user = request.auth.user or {}
        name = (user.get('name') or '').split(' ', 1)
        form = CVBuilderForm(initial={
            'first_name': name[0] if name else '',
            'last_name': name[1] if len(name) > 1 else '',
            'email': user.get('email', ''),
        })
        return render(request, 'jobs/cv_builder.html', {'form': form})

    form = CVBuilderForm(request.POST)
    if not form.is_valid():
        return render(request, 'jobs/cv_builder.html', {'form': form})

    if request.POST.get('action') == 'pdf':
        data = form.cleaned_data
        pdf = render_to_pdf('jobs/cv_pdf.html', {'cv': data})
        if pdf is None:
            messages.error(request, "Could not generate the PDF. Please try again.")
            return render(request, 'jobs/cv_builder.html', {'form': form})
        response = HttpResponse(pdf, content_type='application/pdf')
        filename = cv_filename(data.get('first_name'), data.get('last_name'))
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        return response

    try:
        cvs_api.build(get_client(request), form.to_payload())
    except ApiError as e:
        form.add_error(None, error_message(e, "Failed to save CV"))
        return render(request, 'jobs/cv_builder.html', {'form': form})
    messages.success(request, "CV saved to your account.")
    return redirect('jobs:cv_manager')


# -------------------------
# Settings
# -------------------------
@job_seeker_required
def settings_view(request):
    client = get_client(request)
    account_form = None
    password_form = ChangePasswordForm(min_length=6)

    if request.method == 'POST':
        action = request.POST.get('action')
        if action == 'account':
            account_form = AccountSettingsForm(request.POST)
            if account_form.is_valid():
                try:
                    profile_api.update_job_seeker_profile(client, account_form.to_payload())
                except ApiError as e:
                    logger.warning("Preference update failed: %s", e)
                    messages.error(request, "Failed to update preferences")
                else:
                    messages.success(request, "Account preferences updated successfully!")
                    return redirect('jobs:settings')
        elif action == 'password':
            password_form = ChangePasswordForm(request.POST, min_length=6)
            if password_form.is_valid():
                try:
                    auth_api.change_password(
                        client,
                        password_form.cleaned_data['current_password'],
                        password_form.cleaned_data['new_password'],
                    )
                except ApiError as e:
                    messages.error(request, error_message(e, "Failed to update password"))
                else:
                    messages.success(request, "Password updated successfully!")
                    return redirect('jobs:settings')
        elif action == 'deactivate':
            try:
                users_api.deactivate_account(client)
            except ApiError as e:
                messages.error(request, error_message(e, "Failed to deactivate account"))
                return redirect('jobs:settings')
            request.auth.logout()
            messages.success(request, "Account deactivated. Logging out...")
            return redirect('accounts:login')
        else:
            return HttpResponseBadRequest("Unknown action")

    data, error = call_or_default(profile_api.get_job_seeker_profile, client, default={},
                                  error_text="Failed to load settings")
    data = data or {}
    if account_form is None:
        account_form = AccountSettingsForm(initial={
            'phone': data.get('phone') or '',
            'profile_visibility': data.get('profileVisibility') or 'public',
        })
    email = (data.get('user') or {}).get('email') or (request.auth.user or {}).get('email', '')
    return render(request, 'jobs/settings.html', {
        'account_form': account_form,
        'password_form': password_form,
        'email': email,
        'error': error,
    })


# -------------------------
# AI assistant (any signed-in role)
# -------------------------
@login_required
@require_POST
def assistant_chat(request):
    try:
        payload = json.loads(request.body.decode('utf-8') or '{}')
    except ValueError:
        payload = request.POST
    if not isinstance(payload, dict):
        payload = {}
    message = payload.get('message')
    message = message.strip() if isinstance(message, str) else ''
    if not message:
        return HttpResponseBadRequest("Message is required")
    try:
        data = ai_api.chat(get_client(request), message)
    except ApiError as e:
        logger.warning("Assistant chat failed: %s", e)
        return JsonResponse({'ok': False, 'error': error_message(e, "The assistant is unavailable right now.")},
                            status=502)
    reply = data.get('response') if isinstance(data, dict) else data
    return JsonResponse({'ok': True, 'reply': reply or ''})
