# api/ai.py
from .client import decode


def chat(client, message):
    return decode(client.post('/ai/chat', json={'message': message}))


def optimize_job(client, title, industry='Technology'):
    return decode(client.post('/ai/optimize-job', json={'title': title, 'industry': industry}))


def analyze_my_cv(client):
    return decode(client.get('/ai/analyze-my-cv'))


def get_match_score(client, job_id):
    return decode(client.get(f'/ai/match-score/{job_id}'))
