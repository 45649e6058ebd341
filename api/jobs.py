# api/jobs.py
from .client import decode


def get_all(client, params=None):
    # public, paginated
    return decode(client.get('/jobs/public', params=params))


def get_by_id(client, job_id):
    return decode(client.get(f'/jobs/{job_id}'))


def create(client, data):
    return decode(client.post('/jobs', json=data))


def update(client, job_id, data):
    return decode(client.put(f'/jobs/{job_id}', json=data))


def delete(client, job_id):
    client.delete(f'/jobs/{job_id}')


def search(client, params=None):
    # keyword, location, type, title, page, size, sort
    return decode(client.get('/jobs/search', params=params))


def get_by_employer(client, employer_id):
    return decode(client.get(f'/jobs/employer/{employer_id}'))


def get_my_jobs(client):
    return decode(client.get('/jobs/my-jobs'))


def close(client, job_id):
    return decode(client.put(f'/jobs/{job_id}/close'))


# -------------------------
# Admin moderation
# -------------------------
def get_pending(client):
    return decode(client.get('/admin/jobs/pending'))


def get_by_status(client, status, params=None):
    return decode(client.get(f'/admin/jobs/status/{status}', params=params))


def approve(client, job_id):
    return decode(client.put(f'/admin/jobs/{job_id}/approve'))


def reject(client, job_id, reason):
    return decode(client.put(f'/admin/jobs/{job_id}/reject', json={'reason': reason}))


def get_statistics(client):
    return decode(client.get('/admin/jobs/statistics'))
