# employers/views.py
import logging
from collections import OrderedDict

from django.contrib import messages
from django.http import HttpResponseBadRequest
from django.shortcuts import redirect, render

from accounts.decorators import role_required
from accounts.forms import ChangePasswordForm
from accounts.roles import EMPLOYER
from api import ai as ai_api
from api import applications as applications_api
from api import auth as auth_api
from api import employers as employers_api
from api import jobs as jobs_api
from api.client import ApiError, call_or_default, error_message, get_client
from api.dto import APPLICATION_STATUSES, JOB_STATUSES, Application, Employer, Job, many

from .forms import (
    ApplicationNoteForm,
    ApplicationStatusForm,
    CompanyProfileForm,
    JobPostForm,
    VerificationRequestForm,
)

logger = logging.getLogger(__name__)

RECENT_JOBS_LIMIT = 5
EMPLOYER_PASSWORD_MIN_LENGTH = 8

employer_required = role_required(EMPLOYER)


def _items(data):
    if isinstance(data, dict):
        return data.get('content') or []
    return data or []


# -------------------------
# Dashboard
# -------------------------
@employer_required
def dashboard(request):
    client = get_client(request)
    stats, stats_error = call_or_default(employers_api.get_statistics, client, default={},
                                         error_text="Failed to load statistics")
    jobs, jobs_error = call_or_default(jobs_api.get_my_jobs, client, default=[],
                                       error_text="Failed to load jobs")
    return render(request, 'employers/dashboard.html', {
        'stats': stats or {},
        'recent_jobs': many(Job, _items(jobs))[:RECENT_JOBS_LIMIT],
        'errors': [e for e in (stats_error, jobs_error) if e],
    })


# -------------------------
# Job CRUD
# -------------------------
@employer_required
def my_jobs(request):
    client = get_client(request)
    if request.method == 'POST':
        action = request.POST.get('action')
        job_id = request.POST.get('job_id')
        if not job_id or action not in ('delete', 'close'):
            return HttpResponseBadRequest("Unknown action")
        try:
            if action == 'delete':
                jobs_api.delete(client, job_id)
                messages.success(request, "Job deleted.")
            else:
                jobs_api.close(client, job_id)
                messages.success(request, "Job closed.")
        except ApiError as e:
            messages.error(request, error_message(e, f"Failed to {action} job"))
        return redirect('employers:my_jobs')

    data, error = call_or_default(jobs_api.get_my_jobs, client, default=[], error_text="Failed to load jobs")
    jobs = many(Job, _items(data))
    status = request.GET.get('status', '').strip().upper()
    if status:
        jobs = [j for j in jobs if (j.status or '').upper() == status]
    return render(request, 'employers/my_jobs.html', {
        'jobs': jobs,
        'status': status,
        'statuses': JOB_STATUSES,
        'error': error,
    })


def _suggest_description(request, form):
    """Fill the description field from the AI job optimizer, in place."""
    title = (request.POST.get('title') or '').strip()
    if not title:
        messages.error(request, "Please enter a job title first so a description can be generated.")
        return form
    try:
        res = ai_api.optimize_job(get_client(request), title, 'Technology')
    except ApiError as e:
        logger.warning("AI suggestion failed: %s", e)
        messages.error(request, "AI service is busy, please try again.")
        return form
    data = request.POST.copy()
    data['description'] = (res or {}).get('suggestion') or data.get('description', '')
    return JobPostForm(data)


@employer_required
def post_job(request):
    if request.method == 'POST':
        form = JobPostForm(request.POST)
        if request.POST.get('action') == 'suggest':
            form = _suggest_description(request, form)
            return render(request, 'employers/post_job.html', {'form': form})
        if form.is_valid():
            try:
                jobs_api.create(get_client(request), form.to_payload())
            except ApiError as e:
                form.add_error(None, error_message(e, "Failed to post job"))
            else:
                messages.success(request, "Job posted successfully. It will be visible once approved.")
                return redirect('employers:my_jobs')
    else:
        form = JobPostForm()
    return render(request, 'employers/post_job.html', {'form': form})


@employer_required
def edit_job(request, job_id):
    client = get_client(request)
    if request.method == 'POST':
        form = JobPostForm(request.POST)
        if request.POST.get('action') == 'suggest':
            form = _suggest_description(request, form)
        elif form.is_valid():
            try:
                jobs_api.update(client, job_id, form.to_payload())
            except ApiError as e:
                form.add_error(None, error_message(e, "Failed to update job"))
            else:
                messages.success(request, "Job updated.")
                return redirect('employers:my_jobs')
        return render(request, 'employers/post_job.html', {'form': form, 'job_id': job_id})

    try:
        job = jobs_api.get_by_id(client, job_id)
    except ApiError as e:
        messages.error(request, error_message(e, "Failed to load job"))
        return redirect('employers:my_jobs')
    form = JobPostForm(initial=JobPostForm.initial_from(job))
    return render(request, 'employers/post_job.html', {'form': form, 'job_id': job_id, 'job': Job.from_json(job)})


@employer_required
def job_analytics(request, job_id):
    client = get_client(request)
    try:
        job = Job.from_json(jobs_api.get_by_id(client, job_id))
    except ApiError as e:
        return render(request, 'employers/job_analytics.html', {'error': error_message(e, "Failed to load analytics")})

    apps, apps_error = call_or_default(employers_api.get_applications_for_job, client, job_id, default=[],
                                       error_text="Failed to load applications")
    stats, _ = call_or_default(employers_api.get_statistics, client, default={})
    applications = many(Application, _items(apps))

    pipeline = OrderedDict((status, 0) for status in APPLICATION_STATUSES)
    for app in applications:
        key = (app.status or 'PENDING').upper()
        pipeline[key] = pipeline.get(key, 0) + 1
    total = len(applications)
    return render(request, 'employers/job_analytics.html', {
        'job': job,
        'applications': applications,
        'pipeline': [
            {'status': status, 'count': count, 'percent': round(count * 100 / total) if total else 0}
            for status, count in pipeline.items()
        ],
        'total_applications': total,
        'view_count': job.raw.get('viewCount') or job.raw.get('views') or 0,
        'stats': stats or {},
        'error': apps_error,
    })


# -------------------------
# Applications
# -------------------------
@employer_required
def applications(request):
    client = get_client(request)
    job_id = request.GET.get('job', '').strip()
    status = request.GET.get('status', '').strip().upper()
    try:
        if job_id:
            data = employers_api.get_applications_for_job(client, job_id)
        else:
            data = employers_api.get_applications(client)
        apps = many(Application, _items(data))
        error = None
    except ApiError as e:
        apps = []
        error = error_message(e, "Failed to load applications")
    if status:
        apps = [a for a in apps if (a.status or '').upper() == status]

    jobs, _ = call_or_default(jobs_api.get_my_jobs, client, default=[])
    return render(request, 'employers/applications.html', {
        'applications': apps,
        'jobs': many(Job, _items(jobs)),
        'job_id': job_id,
        'status': status,
        'statuses': APPLICATION_STATUSES,
        'error': error,
    })


@employer_required
def application_detail(request, application_id):
    client = get_client(request)
    if request.method == 'POST':
        action = request.POST.get('action')
        if action == 'status':
            form = ApplicationStatusForm(request.POST)
            if form.is_valid():
                try:
                    applications_api.update_status(client, application_id, form.cleaned_data['status'])
                    messages.success(request, f"Status updated to {form.cleaned_data['status'].title()}.")
                except ApiError as e:
                    messages.error(request, error_message(e, "Failed to update status"))
            else:
                messages.error(request, "Unknown application status.")
        elif action == 'note':
            form = ApplicationNoteForm(request.POST)
            if form.is_valid():
                try:
                    applications_api.save_note(client, application_id, form.cleaned_data['note'])
                    messages.success(request, "Note saved.")
                except ApiError as e:
                    messages.error(request, error_message(e, "Failed to save note"))
            else:
                messages.error(request, "Note cannot be empty.")
        else:
            return HttpResponseBadRequest("Unknown action")
        return redirect('employers:application_detail', application_id=application_id)

    try:
        application = Application.from_json(applications_api.get_by_id(client, application_id))
    except ApiError as e:
        return render(request, 'employers/application_detail.html', {
            'error': error_message(e, "Failed to load application"),
        })
    return render(request, 'employers/application_detail.html', {
        'application': application,
        'statuses': APPLICATION_STATUSES,
        'note_form': ApplicationNoteForm(initial={'note': application.notes}),
    })


# -------------------------
# Company profile / verification
# -------------------------
@employer_required
def company_profile(request):
    client = get_client(request)
    if request.method == 'POST':
        form = CompanyProfileForm(request.POST)
        if form.is_valid():
            try:
                employers_api.update_profile(client, form.to_payload())
            except ApiError as e:
                messages.error(request, error_message(e, "Failed to update profile"))
            else:
                messages.success(request, "Profile updated successfully")
                return redirect('employers:company_profile')
        return render(request, 'employers/company_profile.html', {'form': form, 'editing': True})

    data, error = call_or_default(employers_api.get_profile, client, default={}, error_text="Failed to load profile")
    return render(request, 'employers/company_profile.html', {
        'employer': Employer.from_json(data),
        'form': CompanyProfileForm(initial=CompanyProfileForm.initial_from(data)),
        'editing': request.GET.get('edit') == '1',
        'error': error,
    })


@employer_required
def verification(request):
    client = get_client(request)
    form = VerificationRequestForm()
    if request.method == 'POST':
        form = VerificationRequestForm(request.POST)
        if form.is_valid():
            try:
                employers_api.request_verification(client, form.to_payload())
            except ApiError as e:
                messages.error(request, error_message(e, "Failed to submit verification request"))
            else:
                messages.success(request, "Verification request submitted.")
                return redirect('employers:verification')

    status, error = call_or_default(employers_api.get_verification_status, client, default=None,
                                    error_text="Failed to load verification status")
    return render(request, 'employers/verification.html', {
        'verification': status if isinstance(status, dict) else {'status': status},
        'form': form,
        'error': error,
    })


# -------------------------
# Settings
# -------------------------
@employer_required
def settings_view(request):
    client = get_client(request)
    profile_form = None
    password_form = ChangePasswordForm(min_length=EMPLOYER_PASSWORD_MIN_LENGTH)

    if request.method == 'POST':
        action = request.POST.get('action')
        if action == 'general':
            profile_form = CompanyProfileForm(request.POST)
            if profile_form.is_valid():
                try:
                    employers_api.update_profile(client, profile_form.to_payload())
                except ApiError as e:
                    messages.error(request, error_message(e, "Failed to update profile"))
                else:
                    messages.success(request, "Profile updated successfully")
                    return redirect('employers:settings')
        elif action == 'password':
            password_form = ChangePasswordForm(request.POST, min_length=EMPLOYER_PASSWORD_MIN_LENGTH)
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
                    messages.success(request, "Password updated successfully")
                    return redirect('employers:settings')
        else:
            return HttpResponseBadRequest("Unknown action")

    error = None
    if profile_form is None:
        data, error = call_or_default(employers_api.get_profile, client, default={},
                                      error_text="Failed to load profile")
        profile_form = CompanyProfileForm(initial=CompanyProfileForm.initial_from(data))
    return render(request, 'employers/settings.html', {
        'profile_form': profile_form,
        'password_form': password_form,
        'error': error,
    })
