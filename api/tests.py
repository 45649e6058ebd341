# api/tests.py
from unittest import mock

import requests
from django.test import SimpleTestCase, override_settings

from jobsite.testing import make_response

from . import auth as auth_api
from . import cvs as cvs_api
from .client import ApiClient, ApiError, NetworkError, call_or_default, decode, error_message
from .dto import Application, Job, User
from .pagination import PageState


def make_client(response=None, token=None, side_effect=None):
    session = mock.Mock()
    session.headers = {}
    session.request.return_value = response if response is not None else make_response(200, {})
    if side_effect is not None:
        session.request.side_effect = side_effect
    client = ApiClient(base_url='http://backend.test/api', token=token, session=session)
    return client, session


class ApiClientRequestTest(SimpleTestCase):

    def test_bearer_header_attached_when_token_present(self):
        client, session = make_client(token='abc123')
        client.get('/jobs/public')
        headers = session.request.call_args.kwargs['headers']
        self.assertEqual(headers['Authorization'], 'Bearer abc123')

    def test_no_authorization_header_without_token(self):
        client, session = make_client(token=None)
        client.get('/jobs/public')
        self.assertNotIn('Authorization', session.request.call_args.kwargs['headers'])

    def test_token_callable_is_read_per_request(self):
        store = {}
        client, session = make_client(token=lambda: store.get('token'))
        client.get('/auth/me')
        self.assertNotIn('Authorization', session.request.call_args.kwargs['headers'])
        store['token'] = 'fresh'
        client.get('/auth/me')
        self.assertEqual(session.request.call_args.kwargs['headers']['Authorization'], 'Bearer fresh')

    def test_fixed_timeout_and_url(self):
        client, session = make_client()
        client.get('jobs/7')
        args, kwargs = session.request.call_args
        self.assertEqual(args, ('GET', 'http://backend.test/api/jobs/7'))
        self.assertEqual(kwargs['timeout'], 10)

    def test_empty_params_dropped(self):
        client, session = make_client()
        client.get('/jobs/search', params={'keyword': 'python', 'location': '', 'type': None, 'page': 0})
        self.assertEqual(session.request.call_args.kwargs['params'], {'keyword': 'python', 'page': 0})

    def test_success_passes_response_through(self):
        response = make_response(200, {'id': 1})
        client, _ = make_client(response)
        self.assertIs(client.get('/jobs/1'), response)

    def test_401_logged_as_warning_and_raised(self):
        client, _ = make_client(make_response(401, {'message': 'expired'}))
        with self.assertLogs('api.client', level='WARNING') as logs:
            with self.assertRaises(ApiError) as ctx:
                client.get('/auth/me')
        self.assertTrue(ctx.exception.is_unauthorized)
        self.assertIn('401 Unauthorized received for: GET http://backend.test/api/auth/me', logs.output[0])

    def test_403_logged_as_error(self):
        client, _ = make_client(make_response(403))
        with self.assertLogs('api.client', level='ERROR') as logs:
            with self.assertRaises(ApiError) as ctx:
                client.delete('/jobs/3')
        self.assertTrue(ctx.exception.is_forbidden)
        self.assertIn('Access denied', logs.output[0])

    def test_5xx_logged_as_server_error(self):
        client, _ = make_client(make_response(503, b'down'))
        with self.assertLogs('api.client', level='ERROR') as logs:
            with self.assertRaises(ApiError) as ctx:
                client.post('/jobs', json={})
        self.assertEqual(ctx.exception.status, 503)
        self.assertIn('Server error (503)', logs.output[0])

    def test_4xx_raised_with_backend_message(self):
        client, _ = make_client(make_response(400, {'message': 'Title is required'}))
        with self.assertRaises(ApiError) as ctx:
            client.post('/jobs', json={})
        self.assertEqual(ctx.exception.message, 'Title is required')
        self.assertEqual(ctx.exception.payload, {'message': 'Title is required'})

    def test_connection_error_becomes_network_error(self):
        client, _ = make_client(side_effect=requests.exceptions.ConnectionError('refused'))
        with self.assertLogs('api.client', level='ERROR'):
            with self.assertRaises(NetworkError) as ctx:
                client.get('/jobs/public')
        self.assertIsNone(ctx.exception.status)

    def test_timeout_becomes_network_error(self):
        client, _ = make_client(side_effect=requests.exceptions.Timeout())
        with self.assertLogs('api.client', level='ERROR'):
            with self.assertRaises(NetworkError):
                client.get('/jobs/public')

    @override_settings(API_BASE_URL='http://configured.test/api/', API_TIMEOUT=3)
    def test_defaults_read_from_settings(self):
        client = ApiClient(session=mock.Mock(headers={}))
        self.assertEqual(client.build_url('/auth/me'), 'http://configured.test/api/auth/me')
        self.assertEqual(client.timeout, 3)


class ErrorMessageTest(SimpleTestCase):

    def test_prefers_payload_message_then_error(self):
        self.assertEqual(error_message(ApiError('x', payload={'message': 'm', 'error': 'e'}), 'd'), 'm')
        self.assertEqual(error_message(ApiError('x', payload={'error': 'e'}), 'd'), 'e')

    def test_network_error_text(self):
        self.assertEqual(error_message(NetworkError('boom')), 'Network error. Please check your connection.')

    def test_default_when_payload_silent(self):
        self.assertEqual(error_message(ApiError('x', status=500, payload=None), 'Failed to load'), 'Failed to load')

    def test_call_or_default_isolates_failure(self):
        def broken():
            raise ApiError('x', status=500, payload={'message': 'stats down'})
        with self.assertLogs('api.client', level='WARNING'):
            value, error = call_or_default(broken, default={})
        self.assertEqual(value, {})
        self.assertEqual(error, 'stats down')

    def test_call_or_default_passes_value(self):
        self.assertEqual(call_or_default(lambda a, b=0: a + b, 1, b=2), (3, None))


class DecodeTest(SimpleTestCase):

    def test_empty_body_is_none(self):
        self.assertIsNone(decode(make_response(204)))

    def test_json_body(self):
        self.assertEqual(decode(make_response(200, [{'id': 1}])), [{'id': 1}])


class PageStateTest(SimpleTestCase):

    def test_spring_page_reflected_unchanged(self):
        data = {'content': [{'id': 1}, {'id': 2}], 'totalElements': 27, 'totalPages': 3, 'number': 1, 'size': 12}
        state = PageState.from_response(data)
        self.assertEqual(state.items, [{'id': 1}, {'id': 2}])
        self.assertEqual(state.as_dict(), {'page': 1, 'size': 12, 'totalPages': 3, 'totalElements': 27})
        self.assertTrue(state.has_previous)
        self.assertTrue(state.has_next)
        self.assertEqual(state.page_numbers, [0, 1, 2])

    def test_missing_fields_fall_back(self):
        state = PageState.from_response({}, default_size=12)
        self.assertEqual((state.items, state.page, state.size, state.total_pages, state.total_elements),
                         ([], 0, 12, 0, 0))
        self.assertFalse(state.has_next)

    def test_zero_values_kept(self):
        state = PageState.from_response({'content': [], 'number': 0, 'size': 0, 'totalPages': 0, 'totalElements': 0})
        self.assertEqual(state.size, 0)

    def test_bare_list_is_single_page(self):
        state = PageState.from_response([{'id': 1}])
        self.assertEqual((state.page, state.total_pages, state.total_elements), (0, 1, 1))

    def test_map_converts_items(self):
        state = PageState.from_response({'content': [{'id': 4, 'title': 'Dev'}]}).map(Job.from_json)
        self.assertEqual(state.items[0].title, 'Dev')


class DtoTest(SimpleTestCase):

    def test_job_reads_alternate_field_names(self):
        job = Job.from_json({'id': 1, 'jobType': 'Contract', 'salaryRange': '$50k', 'employer': {'id': 9, 'companyName': 'Acme'},
                             'status': 'PENDING'})
        self.assertEqual((job.type, job.salary, job.employer_id, job.employer_name), ('Contract', '$50k', 9, 'Acme'))
        self.assertTrue(job.is_pending)

    def test_application_notes_and_job(self):
        app = Application.from_json({'id': 2, 'job': {'id': 5, 'title': 'QA'}, 'employerNotes': 'call back'})
        self.assertEqual((app.job_id, app.job_title, app.notes), (5, 'QA', 'call back'))

    def test_user_name_fallbacks(self):
        self.assertEqual(User.from_json({'email': 'a@b.co', 'companyName': 'Acme'}).name, 'Acme')
        self.assertFalse(User.from_json({'isActive': False}).is_active)


class AuthApiTest(SimpleTestCase):

    def test_extract_token_variants(self):
        self.assertEqual(auth_api.extract_token({'token': 't1'}), 't1')
        self.assertEqual(auth_api.extract_token({'accessToken': 't2'}), 't2')
        self.assertEqual(auth_api.extract_token({'access_token': 't3'}), 't3')
        self.assertIsNone(auth_api.extract_token({'user': {}}))
        self.assertIsNone(auth_api.extract_token(None))

    def test_change_password_payload(self):
        client, session = make_client(make_response(200, {}), token='t')
        auth_api.change_password(client, 'old', 'newpass')
        args, kwargs = session.request.call_args
        self.assertEqual(args[0], 'PUT')
        self.assertTrue(args[1].endswith('/auth/change-password'))
        self.assertEqual(kwargs['json'], {'currentPassword': 'old', 'newPassword': 'newpass'})


class CvApiTest(SimpleTestCase):

    def test_download_uses_content_disposition_filename(self):
        response = make_response(200, b'%PDF-1.4', headers={
            'Content-Disposition': 'attachment; filename="jane_cv.pdf"',
            'Content-Type': 'application/pdf',
        })
        client, _ = make_client(response, token='t')
        content, filename, content_type = cvs_api.download(client, 3)
        self.assertEqual((content, filename, content_type), (b'%PDF-1.4', 'jane_cv.pdf', 'application/pdf'))

    def test_download_fallback_name(self):
        client, _ = make_client(make_response(200, b'data'), token='t')
        _, filename, _ = cvs_api.download(client, 3, fallback_name='CV_Applicant.pdf')
        self.assertEqual(filename, 'CV_Applicant.pdf')
