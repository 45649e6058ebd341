# api/administration.py
"""Administrator endpoints (/admin/...)."""
from . import jobs
from .client import decode


# -------------------------
# Employers
# -------------------------
def get_pending_employers(client):
    return decode(client.get('/admin/employers/pending'))


def get_approved_employers(client):
    return decode(client.get('/admin/employers/approved'))


def get_all_employers(client):
    return decode(client.get('/admin/employers'))


def approve_employer(client, employer_id):
    return decode(client.put(f'/admin/employers/{employer_id}/approve'))


def reject_employer(client, employer_id, reason):
    return decode(client.put(f'/admin/employers/{employer_id}/reject', json={'reason': reason}))


def search_employers(client, company_name):
    return decode(client.get('/admin/employers/search', params={'companyName': company_name}))


# -------------------------
# Users
# -------------------------
def get_all_users(client, params=None):
    return decode(client.get('/admin/users', params=params))


def get_user_by_id(client, user_id):
    return decode(client.get(f'/admin/users/{user_id}'))


def get_users_by_role(client, role):
    return decode(client.get(f'/admin/users/role/{role}'))


def activate_user(client, user_id):
    return decode(client.put(f'/admin/users/{user_id}/activate'))


def deactivate_user(client, user_id):
    return decode(client.put(f'/admin/users/{user_id}/deactivate'))


def delete_user(client, user_id):
    client.delete(f'/admin/users/{user_id}')


def search_users(client, email):
    return decode(client.get('/admin/users/search', params={'email': email}))


# -------------------------
# Jobs (moderation) live with the other job endpoints
# -------------------------
get_pending_jobs = jobs.get_pending
get_jobs_by_status = jobs.get_by_status
approve_job = jobs.approve
reject_job = jobs.reject


# -------------------------
# Moderation logs / statistics
# -------------------------
def get_job_moderation_logs(client, job_id):
    return decode(client.get(f'/admin/moderation-logs/job/{job_id}'))


def get_all_moderation_logs(client):
    return decode(client.get('/admin/moderation-logs'))


def get_statistics(client):
    return decode(client.get('/admin/statistics'))
