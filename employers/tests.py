# employers/tests.py
import datetime
from unittest import mock

from django.test import SimpleTestCase
from django.urls import reverse

from api.client import ApiError
from jobsite.testing import SessionMixin

from .forms import ApplicationStatusForm, JobPostForm


class EmployerTestCase(SessionMixin, SimpleTestCase):

    def setUp(self):
        self.sign_in(role='employer', name='Acme Ltd', email='hr@acme.test')


class JobPostFormTest(SimpleTestCase):

    def test_payload_uses_end_of_day_deadline(self):
        deadline = datetime.date.today() + datetime.timedelta(days=10)
        form = JobPostForm(data={
            'title': 'Backend Developer',
            'type': 'Contract',
            'deadline': deadline.isoformat(),
            'salary': '$60k',
        })
        self.assertTrue(form.is_valid(), form.errors)
        payload = form.to_payload()
        self.assertEqual(payload['deadline'], f"{deadline.isoformat()}T23:59:59")
        self.assertEqual(payload['salaryRange'], '$60k')
        self.assertEqual(payload['type'], 'Contract')

    def test_past_deadline_rejected(self):
        yesterday = datetime.date.today() - datetime.timedelta(days=1)
        form = JobPostForm(data={'title': 'X', 'type': 'Full-time', 'deadline': yesterday.isoformat()})
        self.assertFalse(form.is_valid())
        self.assertIn('deadline', form.errors)

    def test_initial_from_backend_job(self):
        initial = JobPostForm.initial_from({'title': 'QA', 'jobType': 'Part-time', 'deadline': '2030-01-31T23:59:59'})
        self.assertEqual(initial['type'], 'Part-time')
        self.assertEqual(initial['deadline'], '2030-01-31')


class ApplicationStatusFormTest(SimpleTestCase):

    def test_status_is_upper_cased(self):
        form = ApplicationStatusForm(data={'status': 'shortlisted'})
        self.assertTrue(form.is_valid())
        self.assertEqual(form.cleaned_data['status'], 'SHORTLISTED')

    def test_unknown_status(self):
        self.assertFalse(ApplicationStatusForm(data={'status': 'hired'}).is_valid())


class GuardTest(SessionMixin, SimpleTestCase):

    def test_job_seeker_bounced_to_public_page(self):
        self.sign_in(role='job_seeker')
        resp = self.client.get(reverse('employers:dashboard'))
        self.assertRedirects(resp, '/', fetch_redirect_response=False)

    def test_anonymous_sent_to_login(self):
        resp = self.client.get(reverse('employers:post_job'))
        self.assertRedirects(resp, '/login/', fetch_redirect_response=False)


class DashboardTest(EmployerTestCase):

    def test_recent_jobs_limited_and_stats_failure_isolated(self):
        jobs = [{'id': i, 'title': f'Job {i}'} for i in range(8)]
        with mock.patch('employers.views.employers_api.get_statistics', side_effect=ApiError('x', status=500)), \
                mock.patch('employers.views.jobs_api.get_my_jobs', return_value=jobs):
            with self.assertLogs('api.client', level='WARNING'):
                resp = self.client.get(reverse('employers:dashboard'))
        self.assertEqual(len(resp.context['recent_jobs']), 5)
        self.assertContains(resp, 'Failed to load statistics')


class PostJobTest(EmployerTestCase):

    def test_creates_job(self):
        with mock.patch('employers.views.jobs_api.create') as create:
            resp = self.client.post(reverse('employers:post_job'), {
                'title': 'Data Analyst', 'type': 'Full-time', 'location': 'Berlin',
            })
        self.assertRedirects(resp, reverse('employers:my_jobs'), fetch_redirect_response=False)
        payload = create.call_args.args[1]
        self.assertEqual(payload['title'], 'Data Analyst')
        self.assertIsNone(payload['deadline'])

    def test_suggest_fills_description(self):
        with mock.patch('employers.views.ai_api.optimize_job',
                        return_value={'suggestion': 'Write SQL all day.'}) as optimize, \
                mock.patch('employers.views.jobs_api.create') as create:
            resp = self.client.post(reverse('employers:post_job'), {
                'action': 'suggest', 'title': 'Data Analyst', 'type': 'Full-time',
            })
        optimize.assert_called_once_with(mock.ANY, 'Data Analyst', 'Technology')
        create.assert_not_called()
        self.assertEqual(resp.context['form'].data['description'], 'Write SQL all day.')

    def test_suggest_needs_title(self):
        with mock.patch('employers.views.ai_api.optimize_job') as optimize:
            self.client.post(reverse('employers:post_job'), {'action': 'suggest', 'title': ''})
        optimize.assert_not_called()


class MyJobsTest(EmployerTestCase):

    def test_close_job(self):
        with mock.patch('employers.views.jobs_api.close') as close:
            resp = self.client.post(reverse('employers:my_jobs'), {'action': 'close', 'job_id': '7'})
        close.assert_called_once_with(mock.ANY, '7')
        self.assertRedirects(resp, reverse('employers:my_jobs'), fetch_redirect_response=False)

    def test_status_filter(self):
        jobs = [{'id': 1, 'status': 'APPROVED'}, {'id': 2, 'status': 'PENDING'}]
        with mock.patch('employers.views.jobs_api.get_my_jobs', return_value=jobs):
            resp = self.client.get(reverse('employers:my_jobs'), {'status': 'pending'})
        self.assertEqual([j.id for j in resp.context['jobs']], [2])


class JobAnalyticsTest(EmployerTestCase):

    JOB = {'id': 3, 'title': 'QA', 'jobType': 'FULL_TIME', 'status': 'APPROVED', 'applicantCount': 0}

    def test_pipeline_percentages(self):
        apps = [{'id': 1, 'status': 'PENDING'}, {'id': 2, 'status': 'PENDING'},
                {'id': 3, 'status': 'ACCEPTED'}, {'id': 4, 'status': 'REJECTED'}]
        with mock.patch('employers.views.jobs_api.get_by_id', return_value=self.JOB), \
                mock.patch('employers.views.employers_api.get_applications_for_job', return_value=apps), \
                mock.patch('employers.views.employers_api.get_statistics', return_value={}):
            resp = self.client.get(reverse('employers:job_analytics', args=[3]))
        self.assertEqual(resp.status_code, 200)
        pipeline = {stage['status']: stage for stage in resp.context['pipeline']}
        self.assertEqual(pipeline['PENDING']['count'], 2)
        self.assertEqual(pipeline['PENDING']['percent'], 50)
        self.assertEqual(pipeline['ACCEPTED']['percent'], 25)
        self.assertEqual(pipeline['SHORTLISTED']['count'], 0)
        self.assertEqual(resp.context['view_count'], 0)

    def test_view_count_from_backend(self):
        with mock.patch('employers.views.jobs_api.get_by_id', return_value=dict(self.JOB, viewCount=41)), \
                mock.patch('employers.views.employers_api.get_applications_for_job', return_value=[]), \
                mock.patch('employers.views.employers_api.get_statistics', return_value={}):
            resp = self.client.get(reverse('employers:job_analytics', args=[3]))
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, '<strong>41</strong>')


class ApplicationsTest(EmployerTestCase):

    def test_job_filter_uses_per_job_endpoint(self):
        with mock.patch('employers.views.employers_api.get_applications_for_job', return_value=[]) as per_job, \
                mock.patch('employers.views.employers_api.get_applications') as all_apps, \
                mock.patch('employers.views.jobs_api.get_my_jobs', return_value=[]):
            self.client.get(reverse('employers:applications'), {'job': '12'})
        per_job.assert_called_once_with(mock.ANY, '12')
        all_apps.assert_not_called()

    def test_status_update_upper_cases(self):
        with mock.patch('employers.views.applications_api.update_status') as update:
            resp = self.client.post(reverse('employers:application_detail', args=[5]),
                                    {'action': 'status', 'status': 'reviewing'})
        update.assert_called_once_with(mock.ANY, 5, 'REVIEWING')
        self.assertRedirects(resp, reverse('employers:application_detail', args=[5]),
                             fetch_redirect_response=False)

    def test_save_note(self):
        with mock.patch('employers.views.applications_api.save_note') as save_note:
            self.client.post(reverse('employers:application_detail', args=[5]),
                             {'action': 'note', 'note': 'Strong portfolio'})
        save_note.assert_called_once_with(mock.ANY, 5, 'Strong portfolio')


class VerificationTest(EmployerTestCase):

    def test_submit_request(self):
        with mock.patch('employers.views.employers_api.request_verification') as submit:
            resp = self.client.post(reverse('employers:verification'), {
                'document_type': 'TAX_CERTIFICATE', 'registration_number': 'RC-123',
            })
        submit.assert_called_once_with(mock.ANY, {
            'documentType': 'TAX_CERTIFICATE', 'registrationNumber': 'RC-123', 'notes': None,
        })
        self.assertRedirects(resp, reverse('employers:verification'), fetch_redirect_response=False)


class SettingsTest(EmployerTestCase):

    def test_password_min_length_eight(self):
        with mock.patch('employers.views.auth_api.change_password') as change, \
                mock.patch('employers.views.employers_api.get_profile', return_value={}):
            resp = self.client.post(reverse('employers:settings'), {
                'action': 'password', 'current_password': 'old', 'new_password': 'abcdef', 'confirm_password': 'abcdef',
            })
        self.assertContains(resp, 'Password must be at least 8 characters.')
        change.assert_not_called()
