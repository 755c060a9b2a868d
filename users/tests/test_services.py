# users/tests/test_services.py
from django.test import TestCase

from core.exceptions import NotFoundError, ValidationError
from core.models import TenantMember
from core.tests.factories import add_member, make_tenant, make_user
from users.models import User
from users.services import UserAdminService, serialize_user


class UserAdminServiceTest(TestCase):
    def setUp(self):
        self.tenant = make_tenant()
        self.user = make_user(full_name='Ana Souza')
        add_member(self.tenant, self.user)

    def test_list_users_with_query(self):
        make_user(email='bruno@example.com', full_name='Bruno Lima')
        users = UserAdminService.list_users('souza')
        self.assertEqual(users, [self.user])
        self.assertEqual(len(UserAdminService.list_users()), 2)

    def test_serialize_user_lists_memberships(self):
        data = serialize_user(self.user)
        self.assertEqual(data['email'], 'owner@example.com')
        self.assertEqual(data['tenants'][0]['slug'], 'iron-gym')

    def test_update_user(self):
        user = UserAdminService.update_user(self.user.pk, {
            'email': 'Ana@Example.com',
            'full_name': ' Ana S. ',
            'password': 'newpass123',
        })
        self.assertEqual(user.email, 'ana@example.com')
        self.assertEqual(user.full_name, 'Ana S.')
        self.assertTrue(user.check_password('newpass123'))

    def test_blank_password_keeps_current(self):
        UserAdminService.update_user(self.user.pk, {'password': ''})
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('secret123'))

    def test_update_rejects_duplicate_email_and_short_password(self):
        make_user(email='taken@example.com')
        with self.assertRaises(ValidationError):
            UserAdminService.update_user(self.user.pk, {'email': 'TAKEN@example.com'})
        with self.assertRaises(ValidationError):
            UserAdminService.update_user(self.user.pk, {'password': '123'})
        with self.assertRaises(ValidationError):
            UserAdminService.update_user(self.user.pk, {'email': 'not-an-email'})

    def test_delete_user_removes_memberships(self):
        UserAdminService.delete_user(self.user.pk)
        self.assertFalse(User.objects.filter(pk=self.user.pk).exists())
        self.assertFalse(TenantMember.objects.exists())

    def test_unknown_user(self):
        with self.assertRaises(NotFoundError):
            UserAdminService.get_user(999999)
