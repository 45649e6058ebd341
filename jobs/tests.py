# jobs/tests.py
import json
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, override_settings
from django.urls import reverse

from api.client import ApiError
from jobsite.testing import SessionMixin

from .forms import ApplyForm, CVBuilderForm

SPRING_PAGE = {
    'content': [{'id': 11, 'title': 'Backend Developer', 'location': 'Remote', 'jobType': 'Full-time'}],
    'totalElements': 25,
    'totalPages': 3,
    'number': 1,
    'size': 12,
}


class JobSeekerTestCase(SessionMixin, SimpleTestCase):

    def setUp(self):
        self.sign_in(role='job_seeker', name='Jane Doe', email='jane@example.com')


class JobListTest(JobSeekerTestCase):

    def test_pagination_state_reflects_backend_page(self):
        with mock.patch('jobs.views.jobs_api.get_all', return_value=SPRING_PAGE) as get_all:
            resp = self.client.get(reverse('jobs:job_list'), {'page': 1})
        self.assertEqual(resp.status_code, 200)
        get_all.assert_called_once()
        self.assertEqual(get_all.call_args.args[1], {'page': 1, 'size': 12})
        state = resp.context['page_state']
        self.assertEqual(state.as_dict(), {'page': 1, 'size': 12, 'totalPages': 3, 'totalElements': 25})
        self.assertEqual(state.items[0].title, 'Backend Developer')
        self.assertContains(resp, 'Backend Developer')

    def test_filters_use_search_endpoint(self):
        with mock.patch('jobs.views.jobs_api.search', return_value=SPRING_PAGE) as search, \
                mock.patch('jobs.views.jobs_api.get_all') as get_all:
            self.client.get(reverse('jobs:job_list'), {'search': 'python', 'type': 'Contract'})
        get_all.assert_not_called()
        params = search.call_args.args[1]
        self.assertEqual(params['keyword'], 'python')
        self.assertEqual(params['type'], 'Contract')
        self.assertEqual(params['page'], 0)

    def test_backend_failure_shows_error(self):
        with mock.patch('jobs.views.jobs_api.get_all', side_effect=ApiError('x', status=500)):
            resp = self.client.get(reverse('jobs:job_list'))
        self.assertContains(resp, 'Failed to fetch jobs')


class JobDetailTest(JobSeekerTestCase):

    def test_similar_jobs_exclude_current_and_match_failure_tolerated(self):
        job = {'id': 5, 'title': 'Data Engineer', 'description': 'Pipelines'}
        similar = {'content': [{'id': 5, 'title': 'Data Engineer'}, {'id': 6, 'title': 'Data Engineer II'}]}
        with mock.patch('jobs.views.jobs_api.get_by_id', return_value=job), \
                mock.patch('jobs.views.jobs_api.search', return_value=similar) as search, \
                mock.patch('jobs.views.ai_api.get_match_score', side_effect=ApiError('busy', status=503)):
            with self.assertLogs('api.client', level='WARNING'):
                resp = self.client.get(reverse('jobs:job_detail', args=[5]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(search.call_args.args[1], {'keyword': 'Data Engineer', 'size': 3})
        self.assertEqual([j.id for j in resp.context['similar_jobs']], [6])
        self.assertIsNone(resp.context['match'])


class ApplyTest(JobSeekerTestCase):

    CVS = [{'id': 1, 'fileName': 'old.pdf'}, {'id': 2, 'fileName': 'main.pdf', 'isDefault': True}]

    def patch_loaders(self):
        return (
            mock.patch('jobs.views.jobs_api.get_by_id', return_value={'id': 9, 'title': 'QA Engineer'}),
            mock.patch('jobs.views.cvs_api.get_mine', return_value=self.CVS),
        )

    def test_default_cv_preselected(self):
        job_patch, cv_patch = self.patch_loaders()
        with job_patch, cv_patch:
            resp = self.client.get(reverse('jobs:apply', args=[9]))
        self.assertEqual(resp.context['form'].initial['cv_id'], 2)

    def test_apply_with_saved_cv(self):
        job_patch, cv_patch = self.patch_loaders()
        with job_patch, cv_patch, mock.patch('jobs.views.applications_api.create') as create:
            resp = self.client.post(reverse('jobs:apply', args=[9]), {'cv_id': '1', 'cover_letter': 'Hello'})
        self.assertRedirects(resp, reverse('jobs:applications'), fetch_redirect_response=False)
        self.assertEqual(create.call_args.args[1], {'jobId': 9, 'cvId': 1, 'coverLetter': 'Hello'})

    def test_upload_wins_over_selection(self):
        upload = SimpleUploadedFile('fresh.pdf', b'%PDF-1.4 data', content_type='application/pdf')
        job_patch, cv_patch = self.patch_loaders()
        with job_patch, cv_patch, \
                mock.patch('jobs.views.cvs_api.upload', return_value={'id': 42}) as do_upload, \
                mock.patch('jobs.views.applications_api.create') as create:
            self.client.post(reverse('jobs:apply', args=[9]), {'cv_id': '1', 'uploaded_cv': upload})
        do_upload.assert_called_once()
        self.assertEqual(create.call_args.args[1]['cvId'], 42)

    def test_rejects_wrong_extension(self):
        upload = SimpleUploadedFile('cv.txt', b'plain text', content_type='text/plain')
        job_patch, cv_patch = self.patch_loaders()
        with job_patch, cv_patch, mock.patch('jobs.views.applications_api.create') as create:
            resp = self.client.post(reverse('jobs:apply', args=[9]), {'uploaded_cv': upload})
        self.assertContains(resp, 'Only PDF, DOC and DOCX files are allowed.')
        create.assert_not_called()

    def test_backend_error_kept_on_page(self):
        job_patch, cv_patch = self.patch_loaders()
        error = ApiError('dup', status=409, payload={'message': 'You have already applied for this job'})
        with job_patch, cv_patch, mock.patch('jobs.views.applications_api.create', side_effect=error):
            resp = self.client.post(reverse('jobs:apply', args=[9]), {'cv_id': '2'})
        self.assertContains(resp, 'You have already applied for this job')


class ApplyFormTest(SimpleTestCase):

    def test_requires_a_cv(self):
        form = ApplyForm(data={})
        self.assertFalse(form.is_valid())
        self.assertIn('Please select a CV or upload a new one.', form.non_field_errors())

    @override_settings(CV_MAX_UPLOAD_SIZE=10)
    def test_size_limit(self):
        upload = SimpleUploadedFile('big.docx', b'x' * 11)
        form = ApplyForm(data={}, files={'uploaded_cv': upload})
        self.assertFalse(form.is_valid())
        self.assertIn('uploaded_cv', form.errors)


class DashboardTest(JobSeekerTestCase):

    def test_failed_statistics_do_not_blank_other_sections(self):
        with mock.patch('jobs.views.applications_api.get_mine', return_value=[{'id': 1, 'jobTitle': 'Designer'}]), \
                mock.patch('jobs.views.jobs_api.get_all', return_value={'content': [{'id': 3, 'title': 'Writer'}]}), \
                mock.patch('jobs.views.profile_api.get_statistics', side_effect=ApiError('x', status=500)):
            with self.assertLogs('api.client', level='WARNING'):
                resp = self.client.get(reverse('jobs:dashboard'))
        self.assertContains(resp, 'Designer')
        self.assertContains(resp, 'Writer')
        self.assertContains(resp, 'Failed to load statistics')


class ApplicationsTest(JobSeekerTestCase):

    def test_withdraw_deletes_application(self):
        with mock.patch('jobs.views.applications_api.delete') as delete:
            resp = self.client.post(reverse('jobs:application_detail', args=[4]), {'action': 'withdraw'})
        delete.assert_called_once_with(mock.ANY, 4)
        self.assertRedirects(resp, reverse('jobs:applications'), fetch_redirect_response=False)

    def test_status_filter(self):
        apps = [{'id': 1, 'status': 'PENDING'}, {'id': 2, 'status': 'ACCEPTED'}]
        with mock.patch('jobs.views.applications_api.get_mine', return_value=apps):
            resp = self.client.get(reverse('jobs:applications'), {'status': 'accepted'})
        self.assertEqual([a.id for a in resp.context['applications']], [2])


class CvManagerTest(JobSeekerTestCase):

    def test_set_default(self):
        with mock.patch('jobs.views.cvs_api.set_default') as set_default:
            resp = self.client.post(reverse('jobs:cv_manager'), {'action': 'default', 'cv_id': '3'})
        set_default.assert_called_once_with(mock.ANY, '3')
        self.assertRedirects(resp, reverse('jobs:cv_manager'), fetch_redirect_response=False)

    def test_metadata_update(self):
        with mock.patch('jobs.views.cvs_api.update_metadata') as update:
            self.client.post(reverse('jobs:cv_manager'),
                             {'action': 'metadata', 'cv_id': '3', 'title': 'Main CV', 'description': ''})
        update.assert_called_once_with(mock.ANY, '3', {'title': 'Main CV', 'description': ''})

    def test_download_streams_file(self):
        with mock.patch('jobs.views.cvs_api.download', return_value=(b'%PDF', 'mine.pdf', 'application/pdf')):
            resp = self.client.get(reverse('jobs:cv_download', args=[3]))
        self.assertEqual(resp['Content-Type'], 'application/pdf')
        self.assertIn('attachment; filename="mine.pdf"', resp['Content-Disposition'])


class CvBuilderTest(JobSeekerTestCase):

    DATA = {
        'first_name': 'Jane',
        'last_name': 'Doe',
        'skills': 'Python, SQL',
        'experience': 'Engineer | Acme | 2020-2023\n\n',
    }

    def test_form_payload(self):
        form = CVBuilderForm(data=self.DATA)
        self.assertTrue(form.is_valid())
        payload = form.to_payload()
        self.assertEqual(payload['skills'], ['Python', 'SQL'])
        self.assertEqual(payload['experience'], [{'role': 'Engineer', 'company': 'Acme', 'period': '2020-2023'}])

    def test_pdf_download(self):
        with mock.patch('jobs.views.render_to_pdf', return_value=b'%PDF-1.4') as render_pdf:
            resp = self.client.post(reverse('jobs:cv_builder'), dict(self.DATA, action='pdf'))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp['Content-Type'], 'application/pdf')
        self.assertIn('Jane_Doe_CV.pdf', resp['Content-Disposition'])
        self.assertEqual(render_pdf.call_args.args[0], 'jobs/cv_pdf.html')

    def test_save_posts_to_backend(self):
        with mock.patch('jobs.views.cvs_api.build') as build:
            resp = self.client.post(reverse('jobs:cv_builder'), dict(self.DATA, action='save'))
        self.assertEqual(build.call_args.args[1]['firstName'], 'Jane')
        self.assertRedirects(resp, reverse('jobs:cv_manager'), fetch_redirect_response=False)


class SettingsTest(JobSeekerTestCase):

    def test_password_min_length_six(self):
        with mock.patch('jobs.views.auth_api.change_password') as change, \
                mock.patch('jobs.views.profile_api.get_job_seeker_profile', return_value={}):
            resp = self.client.post(reverse('jobs:settings'), {
                'action': 'password', 'current_password': 'old', 'new_password': 'abc', 'confirm_password': 'abc',
            })
        self.assertContains(resp, 'Password must be at least 6 characters.')
        change.assert_not_called()

    def test_password_change(self):
        with mock.patch('jobs.views.auth_api.change_password') as change:
            resp = self.client.post(reverse('jobs:settings'), {
                'action': 'password', 'current_password': 'old', 'new_password': 'abcdef', 'confirm_password': 'abcdef',
            })
        change.assert_called_once_with(mock.ANY, 'old', 'abcdef')
        self.assertRedirects(resp, reverse('jobs:settings'), fetch_redirect_response=False)

    def test_deactivate_signs_out(self):
        with mock.patch('jobs.views.users_api.deactivate_account'), \
                mock.patch('accounts.session.auth_api.logout'):
            resp = self.client.post(reverse('jobs:settings'), {'action': 'deactivate'})
        self.assertRedirects(resp, reverse('accounts:login'), fetch_redirect_response=False)
        self.assertNotIn('token', self.client.session)


class AssistantChatTest(JobSeekerTestCase):

    def test_relays_reply(self):
        with mock.patch('jobs.views.ai_api.chat', return_value={'response': 'Try the CV builder.'}) as chat:
            resp = self.client.post(reverse('assistant_chat'), json.dumps({'message': 'help'}),
                                    content_type='application/json')
        chat.assert_called_once_with(mock.ANY, 'help')
        self.assertEqual(resp.json(), {'ok': True, 'reply': 'Try the CV builder.'})

    def test_non_string_message_rejected(self):
        with mock.patch('jobs.views.ai_api.chat') as chat:
            resp = self.client.post(reverse('assistant_chat'), json.dumps({'message': 5}),
                                    content_type='application/json')
        self.assertEqual(resp.status_code, 400)
        chat.assert_not_called()

    def test_empty_message(self):
        resp = self.client.post(reverse('assistant_chat'), json.dumps({'message': ' '}),
                                content_type='application/json')
        self.assertEqual(resp.status_code, 400)
