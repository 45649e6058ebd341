# adminpanel/tests.py
from unittest import mock

from django.test import SimpleTestCase
from django.urls import reverse

from api.client import ApiError
from jobsite.testing import SessionMixin

from . import views


class AdminTestCase(SessionMixin, SimpleTestCase):

    def setUp(self):
        self.sign_in(role='admin', name='Root', email='admin@jobsite.test')


class GuardTest(SessionMixin, SimpleTestCase):

    def test_employer_cannot_open_admin_pages(self):
        self.sign_in(role='employer')
        resp = self.client.get(reverse('adminpanel:jobs'))
        self.assertRedirects(resp, '/', fetch_redirect_response=False)


class JobModerationTest(AdminTestCase):

    PAGE = {'content': [{'id': 4, 'title': 'Sales Lead', 'status': 'PENDING'}],
            'totalElements': 14, 'totalPages': 2, 'number': 1, 'size': 10}

    def test_one_based_page_sent_zero_based(self):
        with mock.patch('adminpanel.views.admin_api.get_jobs_by_status', return_value=self.PAGE) as by_status:
            resp = self.client.get(reverse('adminpanel:jobs'), {'status': 'pending', 'page': 2})
        by_status.assert_called_once_with(mock.ANY, 'PENDING', {'page': 1, 'size': 10})
        state = resp.context['page_state']
        self.assertEqual(state.display_page, 2)
        self.assertFalse(state.has_next)
        self.assertContains(resp, 'Sales Lead')

    def test_unknown_filter_falls_back_to_pending(self):
        with mock.patch('adminpanel.views.admin_api.get_jobs_by_status', return_value=self.PAGE) as by_status:
            self.client.get(reverse('adminpanel:jobs'), {'status': 'bogus', 'page': 'x'})
        by_status.assert_called_once_with(mock.ANY, 'PENDING', {'page': 0, 'size': 10})

    def test_reject_without_reason_uses_default(self):
        with mock.patch('adminpanel.views.admin_api.reject_job') as reject:
            resp = self.client.post(reverse('adminpanel:jobs') + '?status=PENDING&page=3',
                                    {'action': 'reject', 'job_id': '4', 'reason': '  '})
        reject.assert_called_once_with(mock.ANY, '4', views.MODERATION_REJECT_REASON)
        self.assertRedirects(resp, reverse('adminpanel:jobs') + '?status=PENDING&page=3',
                             fetch_redirect_response=False)

    def test_dashboard_reject_default_reason(self):
        with mock.patch('adminpanel.views.admin_api.reject_job') as reject:
            self.client.post(reverse('adminpanel:dashboard'), {'action': 'reject', 'job_id': '4'})
        reject.assert_called_once_with(mock.ANY, '4', views.DASHBOARD_REJECT_REASON)

    def test_approve(self):
        with mock.patch('adminpanel.views.admin_api.approve_job') as approve:
            self.client.post(reverse('adminpanel:jobs'), {'action': 'approve', 'job_id': '4'})
        approve.assert_called_once_with(mock.ANY, '4')

    def test_unknown_action(self):
        resp = self.client.post(reverse('adminpanel:jobs'), {'action': 'archive', 'job_id': '4'})
        self.assertEqual(resp.status_code, 400)

    def test_load_failure_keeps_page(self):
        with mock.patch('adminpanel.views.admin_api.get_jobs_by_status', side_effect=ApiError('down', status=503)):
            resp = self.client.get(reverse('adminpanel:jobs'))
        self.assertContains(resp, 'Failed to load opportunities for moderation')
        self.assertEqual(resp.context['jobs'], [])


class DashboardTest(AdminTestCase):

    def test_statistics_failure_does_not_hide_pending_jobs(self):
        with mock.patch('adminpanel.views.admin_api.get_statistics', side_effect=ApiError('x', status=500)), \
                mock.patch('adminpanel.views.admin_api.get_pending_jobs', return_value=[{'id': 9, 'title': 'Night Nurse'}]):
            with self.assertLogs('api.client', level='WARNING'):
                resp = self.client.get(reverse('adminpanel:dashboard'))
        self.assertContains(resp, 'Night Nurse')
        self.assertContains(resp, 'Failed to load statistics')


class EmployerApprovalTest(AdminTestCase):

    def test_search_takes_precedence(self):
        with mock.patch('adminpanel.views.admin_api.search_employers', return_value=[]) as search, \
                mock.patch('adminpanel.views.admin_api.get_pending_employers') as pending:
            self.client.get(reverse('adminpanel:employers'), {'q': 'acme'})
        search.assert_called_once_with(mock.ANY, 'acme')
        pending.assert_not_called()

    def test_approve_employer(self):
        with mock.patch('adminpanel.views.admin_api.approve_employer') as approve:
            resp = self.client.post(reverse('adminpanel:employers'), {'action': 'approve', 'employer_id': '3'})
        approve.assert_called_once_with(mock.ANY, '3')
        self.assertRedirects(resp, reverse('adminpanel:employers'), fetch_redirect_response=False)


class UserManagementTest(AdminTestCase):

    def test_role_filter_maps_to_backend_role(self):
        with mock.patch('adminpanel.views.admin_api.get_users_by_role',
                        return_value=[{'id': 2, 'email': 'e@x.test', 'role': 'ROLE_EMPLOYER'}]) as by_role:
            resp = self.client.get(reverse('adminpanel:users'), {'role': 'employer'})
        by_role.assert_called_once_with(mock.ANY, 'EMPLOYER')
        self.assertEqual(resp.context['users'][0].role, 'employer')

    def test_deactivate_user(self):
        with mock.patch('adminpanel.views.admin_api.deactivate_user') as deactivate:
            self.client.post(reverse('adminpanel:users'), {'action': 'deactivate', 'user_id': '2'})
        deactivate.assert_called_once_with(mock.ANY, '2')

    def test_detail_toggle_bans_active_user(self):
        with mock.patch('adminpanel.views.admin_api.deactivate_user') as deactivate, \
                mock.patch('adminpanel.views.admin_api.activate_user') as activate:
            self.client.post(reverse('adminpanel:user_detail', args=[2]), {'is_active': '1'})
        deactivate.assert_called_once_with(mock.ANY, 2)
        activate.assert_not_called()


def moderation_log(log_id, action, reason='', job_title='Sales Lead'):
    return {
        'id': log_id,
        'job': {'id': 5, 'title': job_title},
        'admin': {'id': 1, 'email': 'admin@jobsite.test'},
        'action': action,
        'reason': reason,
        'createdAt': '2024-01-01T10:00:00',
    }


class JobLogsTest(AdminTestCase):

    def test_renders_backend_logs(self):
        logs = [moderation_log(1, 'APPROVED', 'ok'), {'id': 2, 'action': 'REJECTED', 'createdAt': '2024-02-03T08:30:00'}]
        with mock.patch('adminpanel.views.jobs_api.get_by_id', return_value={'id': 5, 'title': 'Sales Lead'}), \
                mock.patch('adminpanel.views.admin_api.get_job_moderation_logs', return_value=logs):
            resp = self.client.get(reverse('adminpanel:job_logs', args=[5]))
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, '2024-01-01T10:00')
        self.assertContains(resp, 'admin@jobsite.test')
        self.assertEqual(resp.context['logs'][1]['moderator'], '')
        self.assertEqual(resp.context['logs'][1]['created_at'], '2024-02-03T08:30')


class ProfileTest(AdminTestCase):

    def test_moderation_counts(self):
        logs = [moderation_log(1, 'APPROVED'), moderation_log(2, 'APPROVED'), moderation_log(3, 'REJECTED', 'Spam')]
        with mock.patch('adminpanel.views.profile_api.get_profile', return_value={'email': 'admin@jobsite.test'}), \
                mock.patch('adminpanel.views.admin_api.get_all_moderation_logs', return_value=logs):
            resp = self.client.get(reverse('adminpanel:profile'))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.context['stats'], {'approvals': 2, 'rejections': 1, 'total': 3})
        self.assertContains(resp, '<h1>admin@jobsite.test</h1>')
        self.assertContains(resp, 'Spam')

    def test_full_name_preferred(self):
        with mock.patch('adminpanel.views.profile_api.get_profile',
                        return_value={'fullName': 'Ada Root', 'email': 'admin@jobsite.test'}), \
                mock.patch('adminpanel.views.admin_api.get_all_moderation_logs', return_value=[]):
            resp = self.client.get(reverse('adminpanel:profile'))
        self.assertContains(resp, '<h1>Ada Root</h1>')
