# api/cvs.py
import re

from .client import decode

_FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)


def upload(client, uploaded_file):
    """Multipart upload of a Django UploadedFile (or any named file-like)."""
    name = getattr(uploaded_file, 'name', 'cv')
    content_type = getattr(uploaded_file, 'content_type', None) or 'application/octet-stream'
    files = {'file': (name, uploaded_file, content_type)}
    return decode(client.post('/cvs/upload', files=files))


def build(client, data):
    return decode(client.post('/cvs/build', json=data))


def get_mine(client):
    return decode(client.get('/cvs'))


def get_by_id(client, cv_id):
    return decode(client.get(f'/cvs/{cv_id}'))


def delete(client, cv_id):
    client.delete(f'/cvs/{cv_id}')


def set_default(client, cv_id):
    return decode(client.put(f'/cvs/{cv_id}/default'))


def update_metadata(client, cv_id, metadata):
    return decode(client.put(f'/cvs/{cv_id}/metadata', json=metadata))


def download(client, cv_id, fallback_name='resume.pdf'):
    """
    Returns (content, filename, content_type). The filename comes from the
    backend's Content-Disposition header when present.
    """
    response = client.get(f'/cvs/{cv_id}/download')
    disposition = response.headers.get('Content-Disposition', '')
    match = _FILENAME_RE.search(disposition)
    filename = match.group(1) if match else fallback_name
    content_type = response.headers.get('Content-Type', 'application/octet-stream')
    return response.content, filename, content_type
