# accounts/tests.py
from unittest import mock

from django.contrib.sessions.backends.signed_cookies import SessionStore
from django.test import RequestFactory, SimpleTestCase

from api.client import ApiError
from jobsite.testing import SessionMixin, make_response

from . import roles
from .session import AuthSession, normalize_user


class RoleMappingTest(SimpleTestCase):

    def test_backend_role_shapes(self):
        self.assertEqual(roles.map_backend_role('JOB_SEEKER'), 'job_seeker')
        self.assertEqual(roles.map_backend_role('ROLE_EMPLOYER'), 'employer')
        self.assertEqual(roles.map_backend_role({'name': 'ADMIN'}), 'admin')
        self.assertEqual(roles.map_backend_role(['ROLE_ADMIN', 'ROLE_USER']), 'admin')
        self.assertEqual(roles.map_backend_role({'authority': 'ROLE_JOB_SEEKER'}), 'job_seeker')
        self.assertEqual(roles.map_backend_role('USER'), 'job_seeker')
        self.assertEqual(roles.map_backend_role('customer'), 'job_seeker')

    def test_unknown_and_empty(self):
        self.assertEqual(roles.map_backend_role('MODERATOR'), 'moderator')
        self.assertIsNone(roles.map_backend_role(None))
        self.assertIsNone(roles.map_backend_role([]))

    def test_permissions(self):
        self.assertTrue(roles.has_permission('admin', 'anything'))
        self.assertTrue(roles.has_permission('employer', 'manage_jobs'))
        self.assertFalse(roles.has_permission('job_seeker', 'manage_jobs'))
        self.assertFalse(roles.has_permission(None, 'apply_jobs'))


class RoleRedirectTest(SimpleTestCase):

    def test_prefixed_path_for_each_role(self):
        self.assertEqual(roles.role_redirect_path('employer', 'dashboard'), '/employer/dashboard/')
        self.assertEqual(roles.role_redirect_path('job_seeker', 'dashboard'), '/job-seeker/dashboard/')
        self.assertEqual(roles.role_redirect_path('admin', 'dashboard'), '/admin/dashboard/')

    def test_other_values_go_to_public_path(self):
        for role in (None, '', 'guest', 'moderator', 42):
            self.assertEqual(roles.role_redirect_path(role, 'dashboard'), '/')

    def test_role_case_is_ignored(self):
        self.assertEqual(roles.role_redirect_path('EMPLOYER', 'dashboard'), '/employer/dashboard/')
        self.assertEqual(roles.role_redirect_path('Job_Seeker', 'settings'), '/job-seeker/settings/')
        self.assertEqual(roles.role_redirect_path('EMPLOYER', 'profile'), '/employer/company-profile/')

    def test_employer_profile_is_company_profile(self):
        self.assertEqual(roles.role_redirect_path('employer', 'profile'), '/employer/company-profile/')
        self.assertEqual(roles.role_redirect_path('job_seeker', 'profile'), '/job-seeker/profile/')

    def test_dashboard_route_falls_back_to_job_seeker(self):
        self.assertEqual(roles.dashboard_route('admin'), '/admin/dashboard/')
        self.assertEqual(roles.dashboard_route('unknown'), '/job-seeker/dashboard/')


class AuthSessionTest(SimpleTestCase):

    def setUp(self):
        self.request = RequestFactory().get('/')
        self.request.session = SessionStore()
        self.auth = AuthSession(self.request)

    def test_bootstrap_without_token_is_anonymous(self):
        with mock.patch('accounts.session.auth_api.get_current_user') as me:
            self.assertIsNone(self.auth.bootstrap())
        me.assert_not_called()

    def test_bootstrap_refreshes_user(self):
        self.request.session['token'] = 't'
        with mock.patch('accounts.session.auth_api.get_current_user',
                        return_value={'id': 3, 'email': 'e@x.io', 'role': 'ROLE_EMPLOYER', 'companyName': 'Acme'}):
            user = self.auth.bootstrap()
        self.assertEqual(user['role'], 'employer')
        self.assertEqual(user['name'], 'Acme')
        self.assertEqual(self.request.session['user']['id'], 3)

    def test_401_during_bootstrap_clears_token_and_user(self):
        self.request.session['token'] = 'stale'
        self.request.session['user'] = {'id': 1, 'role': 'job_seeker'}
        with mock.patch('accounts.session.auth_api.get_current_user',
                        side_effect=ApiError('expired', status=401)):
            with self.assertLogs('accounts.session', level='WARNING'):
                self.assertIsNone(self.auth.bootstrap())
        self.assertNotIn('token', self.request.session)
        self.assertNotIn('user', self.request.session)

    def test_other_failure_keeps_cached_user(self):
        cached = {'id': 1, 'role': 'job_seeker'}
        self.request.session['token'] = 't'
        self.request.session['user'] = cached
        with mock.patch('accounts.session.auth_api.get_current_user',
                        side_effect=ApiError('down', status=503)):
            with self.assertLogs('accounts.session', level='ERROR'):
                self.assertEqual(self.auth.bootstrap(), cached)
        self.assertEqual(self.request.session['token'], 't')

    def test_logout_clears_even_when_backend_fails(self):
        self.request.session['token'] = 't'
        self.request.session['user'] = {'id': 1}
        with mock.patch('accounts.session.auth_api.logout', side_effect=ApiError('nope', status=500)):
            with self.assertLogs('accounts.session', level='WARNING'):
                self.auth.logout()
        self.assertIsNone(self.auth.token)
        self.assertIsNone(self.auth.user)

    def test_normalize_user_reads_authorities(self):
        user = normalize_user({'id': 1, 'email': 'a@b.co', 'authorities': [{'authority': 'ROLE_ADMIN'}]})
        self.assertEqual(user['role'], 'admin')
        self.assertIsNone(normalize_user(None))

    def test_normalize_user_keeps_only_session_fields(self):
        user = normalize_user({
            'id': 7, 'email': 'x@y.co', 'fullName': 'Xena Young', 'role': 'EMPLOYER',
            'bio': 'b' * 5000, 'employer': {'companyName': 'Acme'},
        })
        self.assertEqual(user, {
            'id': 7, 'email': 'x@y.co', 'name': 'Xena Young', 'role': 'employer', 'is_active': True,
        })


class LoginViewTest(SessionMixin, SimpleTestCase):

    def test_login_stores_token_and_next_request_carries_bearer(self):
        me = make_response(200, {'id': 7, 'email': 'jane@example.com', 'role': 'JOB_SEEKER', 'fullName': 'Jane'})
        with mock.patch('accounts.views.auth_api.login', return_value={'token': 'tok-123'}), \
                mock.patch('api.client.requests.Session.request', return_value=me) as send:
            resp = self.client.post('/login/', {'email': 'jane@example.com', 'password': 'secret1'})
        self.assertRedirects(resp, '/job-seeker/dashboard/', fetch_redirect_response=False)
        self.assertEqual(self.client.session['token'], 'tok-123')
        self.assertEqual(self.client.session['user']['role'], 'job_seeker')
        method, url = send.call_args.args[:2]
        self.assertEqual(method, 'GET')
        self.assertTrue(url.endswith('/auth/me'))
        self.assertEqual(send.call_args.kwargs['headers']['Authorization'], 'Bearer tok-123')

    def test_access_token_name_accepted(self):
        with mock.patch('accounts.views.auth_api.login', return_value={'accessToken': 'tok'}), \
                mock.patch('accounts.session.auth_api.get_current_user',
                           return_value={'id': 2, 'email': 'boss@example.com', 'role': 'EMPLOYER'}):
            resp = self.client.post('/login/', {'email': 'boss@example.com', 'password': 'secret1'})
        self.assertRedirects(resp, '/employer/dashboard/', fetch_redirect_response=False)

    def test_invalid_email_not_sent(self):
        with mock.patch('accounts.views.auth_api.login') as login:
            resp = self.client.post('/login/', {'email': 'not-an-email', 'password': 'x'})
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, 'Please enter a valid email address.')
        login.assert_not_called()

    def test_backend_rejection_shows_message(self):
        with mock.patch('accounts.views.auth_api.login',
                        side_effect=ApiError('bad', status=401, payload={'message': 'Invalid credentials'})):
            resp = self.client.post('/login/', {'email': 'a@b.co', 'password': 'wrong'})
        self.assertContains(resp, 'Invalid credentials')
        self.assertNotIn('token', self.client.session)

    def test_signed_in_visitor_sent_to_dashboard(self):
        self.sign_in(role='admin')
        resp = self.client.get('/login/')
        self.assertRedirects(resp, '/admin/dashboard/', fetch_redirect_response=False)


class RegisterViewTest(SimpleTestCase):

    def base_data(self, **overrides):
        data = {
            'role': 'JOB_SEEKER',
            'email': 'new@example.com',
            'password': 'secret1',
            'confirm_password': 'secret1',
            'full_name': 'New Person',
            'agree_terms': 'on',
        }
        data.update(overrides)
        return data

    def test_password_mismatch(self):
        with mock.patch('accounts.views.auth_api.register') as register:
            resp = self.client.post('/register/', self.base_data(confirm_password='other1'))
        self.assertContains(resp, 'Passwords do not match.')
        register.assert_not_called()

    def test_short_password(self):
        resp = self.client.post('/register/', self.base_data(password='abc', confirm_password='abc'))
        self.assertContains(resp, 'Password must be at least 6 characters.')

    def test_employer_needs_company_name(self):
        resp = self.client.post('/register/', self.base_data(role='EMPLOYER', full_name=''))
        self.assertContains(resp, 'Company name is required.')

    def test_terms_required(self):
        data = self.base_data()
        del data['agree_terms']
        resp = self.client.post('/register/', data)
        self.assertContains(resp, 'You must accept the terms and conditions.')

    def test_without_token_asks_to_sign_in(self):
        with mock.patch('accounts.views.auth_api.register', return_value={'id': 1}) as register:
            resp = self.client.post('/register/', self.base_data())
        self.assertRedirects(resp, '/login/', fetch_redirect_response=False)
        payload = register.call_args.args[1]
        self.assertEqual(payload['role'], 'JOB_SEEKER')
        self.assertEqual(payload['fullName'], 'New Person')

    def test_with_token_signs_in(self):
        with mock.patch('accounts.views.auth_api.register', return_value={'token': 't'}), \
                mock.patch('accounts.session.auth_api.get_current_user',
                           return_value={'id': 1, 'email': 'new@example.com', 'role': 'JOB_SEEKER'}):
            resp = self.client.post('/register/', self.base_data())
        self.assertRedirects(resp, '/job-seeker/dashboard/', fetch_redirect_response=False)


class GuardTest(SessionMixin, SimpleTestCase):

    def test_anonymous_sent_to_login(self):
        resp = self.client.get('/job-seeker/dashboard/')
        self.assertRedirects(resp, '/login/', fetch_redirect_response=False)

    def test_wrong_role_sent_to_public_page(self):
        self.sign_in(role='employer')
        resp = self.client.get('/job-seeker/dashboard/')
        self.assertRedirects(resp, '/', fetch_redirect_response=False)

    def test_role_neutral_redirects(self):
        self.sign_in(role='employer')
        resp = self.client.get('/profile/')
        self.assertRedirects(resp, '/employer/company-profile/', fetch_redirect_response=False)
        resp = self.client.get('/dashboard/')
        self.assertRedirects(resp, '/employer/dashboard/', fetch_redirect_response=False)

    def test_expired_token_on_page_load_signs_out(self):
        self.sign_in(role='job_seeker')
        self.stub_current_user(side_effect=ApiError('expired', status=401))
        with self.assertLogs('accounts.session', level='WARNING'):
            resp = self.client.get('/job-seeker/dashboard/')
        self.assertRedirects(resp, '/login/', fetch_redirect_response=False)
        self.assertNotIn('token', self.client.session)
        self.assertNotIn('user', self.client.session)


class LogoutAndThemeTest(SessionMixin, SimpleTestCase):

    def test_logout_always_clears(self):
        self.sign_in()
        with mock.patch('accounts.session.auth_api.logout', side_effect=ApiError('down', status=500)):
            with self.assertLogs('accounts.session', level='WARNING'):
                resp = self.client.post('/logout/')
        self.assertRedirects(resp, '/login/', fetch_redirect_response=False)
        self.assertNotIn('token', self.client.session)

    def test_logout_requires_post(self):
        self.assertEqual(self.client.get('/logout/').status_code, 405)

    def test_theme_toggle(self):
        resp = self.client.post('/theme/toggle/', {'next': '/about/'})
        self.assertRedirects(resp, '/about/', fetch_redirect_response=False)
        self.assertEqual(self.client.session['theme'], 'dark')
        self.client.post('/theme/toggle/', {'next': 'https://elsewhere.example/'})
        self.assertEqual(self.client.session['theme'], 'light')

    def test_public_pages_render(self):
        self.assertContains(self.client.get('/'), 'Find the job that fits you')
        self.assertEqual(self.client.get('/about/').status_code, 200)
