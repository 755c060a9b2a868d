# users/tests/test_adapters.py
from django.test import RequestFactory, TestCase, override_settings

from core.tests.factories import add_member, make_tenant, make_user
from users.adapters import NO_TENANT_REDIRECT, AcademyAccountAdapter


class AcademyAccountAdapterTest(TestCase):
    def setUp(self):
        self.adapter = AcademyAccountAdapter()
        self.factory = RequestFactory()

    def login_request(self, user):
        request = self.factory.get('/accounts/login/')
        request.user = user
        return request

    def test_member_goes_to_academy_dashboard(self):
        user = make_user()
        add_member(make_tenant(), user)
        self.assertEqual(
            self.adapter.get_login_redirect_url(self.login_request(user)),
            '/academia/iron-gym/dashboard/'
        )

    def test_super_admin_without_academy_goes_to_platform(self):
        admin = make_user(email='root@example.com', is_super_admin=True)
        self.assertEqual(self.adapter.get_login_redirect_url(self.login_request(admin)), '/platform/tenants/')

    def test_user_without_academy(self):
        user = make_user(email='lonely@example.com')
        self.assertEqual(self.adapter.get_login_redirect_url(self.login_request(user)), NO_TENANT_REDIRECT)

    def test_signup_closed_by_default(self):
        self.assertFalse(self.adapter.is_open_for_signup(self.factory.get('/')))

    @override_settings(ACCOUNT_ALLOW_REGISTRATION=True)
    def test_signup_can_be_opened(self):
        self.assertTrue(self.adapter.is_open_for_signup(self.factory.get('/')))
