"""
Account tests: registration, token login, profile and admin bootstrap.
"""
import pytest

from apps.authz.models import RoleChoices, User

from tests.factories import PASSWORD, make_client, make_distributor, make_user


def registration(**overrides):
    payload = {
        'email': 'new@test.com',
        'password': PASSWORD,
        'password_confirm': PASSWORD,
        'first_name': 'Ren',
    }
    payload.update(overrides)
    return payload


# ============================================================================
# Registration
# ============================================================================

@pytest.mark.django_db
class TestRegistration:

    def test_consumer_registration_returns_tokens(self, api_client):
        response = api_client.post('/api/v1/accounts/register/', registration(), format='json')

        assert response.status_code == 201
        assert response.data['role'] == RoleChoices.CONSUMER
        assert response.data['home'] == 'shop'
        assert set(response.data['tokens']) == {'access', 'refresh'}
        assert User.objects.get(email='new@test.com').check_password(PASSWORD)

    def test_admin_role_is_rejected(self, api_client):
        response = api_client.post(
            '/api/v1/accounts/register/',
            registration(role=RoleChoices.ADMIN),
            format='json',
        )

        assert response.status_code == 400
        assert 'role' in response.data
        assert not User.objects.exists()

    def test_business_account_needs_company_name(self, api_client):
        response = api_client.post(
            '/api/v1/accounts/register/',
            registration(role=RoleChoices.DISTRIBUTOR),
            format='json',
        )

        assert response.status_code == 400
        assert 'company_name' in response.data

    def test_duplicate_email(self, api_client, consumer_user):
        response = api_client.post(
            '/api/v1/accounts/register/',
            registration(email='CONSUMER@test.com'),
            format='json',
        )

        assert response.status_code == 400
        assert 'email' in response.data

    def test_password_mismatch(self, api_client):
        response = api_client.post(
            '/api/v1/accounts/register/',
            registration(password_confirm='something-else'),
            format='json',
        )

        assert response.status_code == 400
        assert 'password_confirm' in response.data


# ============================================================================
# Login and profile
# ============================================================================

@pytest.mark.django_db
class TestTokenLogin:

    def test_login_returns_role_and_home(self, api_client, distributor_user, distributor):
        response = api_client.post(
            '/api/auth/token/',
            {'email': 'store@test.com', 'password': PASSWORD},
            format='json',
        )

        assert response.status_code == 200
        assert 'access' in response.data
        assert response.data['role'] == RoleChoices.DISTRIBUTOR
        assert response.data['home'] == 'distributor'
        assert response.data['display_name'] == 'Corner Shop'

        distributor_user.refresh_from_db()
        assert distributor_user.last_login_at is not None

    def test_wrong_password(self, api_client, consumer_user):
        response = api_client.post(
            '/api/auth/token/',
            {'email': 'consumer@test.com', 'password': 'wrong-password'},
            format='json',
        )
        assert response.status_code == 401

    def test_locked_account_cannot_log_in(self, api_client, consumer_user):
        consumer_user.is_active = False
        consumer_user.save()

        response = api_client.post(
            '/api/auth/token/',
            {'email': 'consumer@test.com', 'password': PASSWORD},
            format='json',
        )
        assert response.status_code == 401

    def test_token_authenticates_requests(self, api_client, consumer_user):
        response = api_client.post(
            '/api/auth/token/',
            {'email': 'consumer@test.com', 'password': PASSWORD},
            format='json',
        )
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")

        response = api_client.get('/api/v1/accounts/me/')

        assert response.status_code == 200
        assert response.data['email'] == 'consumer@test.com'


@pytest.mark.django_db
class TestProfile:

    def test_me(self, consumer_client):
        response = consumer_client.get('/api/v1/accounts/me/')

        assert response.status_code == 200
        assert response.data['first_name'] == 'Hana'
        assert response.data['display_name'] == 'consumer@test.com'

    def test_me_requires_authentication(self, api_client):
        assert api_client.get('/api/v1/accounts/me/').status_code == 401

    def test_chain_store_is_known_by_location(self, chain):
        client = make_client(chain['store_users'][0])

        response = client.get('/api/v1/accounts/me/')

        assert response.data['display_name'] == 'Station Store'

    def test_head_office_is_known_by_company(self, head_office_client):
        response = head_office_client.get('/api/v1/accounts/me/')
        assert response.data['display_name'] == 'Green Mart'

    def test_manufacturer_display_name(self, manufacturer_client, manufacturer):
        response = manufacturer_client.get('/api/v1/accounts/me/')
        assert response.data['display_name'] == 'Kyoto Tea Works'

    def test_distributor_without_active_location(self, db):
        user = make_user('closed@test.com', role=RoleChoices.DISTRIBUTOR, company_name='Closed Shop')
        make_distributor(user, is_active=False)

        assert user.display_name == 'Closed Shop'


# ============================================================================
# Admin bootstrap
# ============================================================================

ADMIN_PAYLOAD = {
    'email': 'root@test.com',
    'password': PASSWORD,
    'password_confirm': PASSWORD,
    'first_name': 'Platform',
    'last_name': 'Admin',
}


@pytest.mark.django_db
class TestCreateAdmin:

    def test_first_admin_can_be_created_anonymously(self, api_client):
        response = api_client.post('/api/v1/accounts/admins/', ADMIN_PAYLOAD, format='json')

        assert response.status_code == 201
        user = User.objects.get(email='root@test.com')
        assert user.role == RoleChoices.ADMIN
        assert user.is_staff is True

    def test_later_anonymous_request_is_refused(self, api_client, admin_user):
        response = api_client.post('/api/v1/accounts/admins/', ADMIN_PAYLOAD, format='json')

        assert response.status_code == 403
        assert not User.objects.filter(email='root@test.com').exists()

    def test_non_admin_is_refused(self, consumer_client, admin_user):
        response = consumer_client.post('/api/v1/accounts/admins/', ADMIN_PAYLOAD, format='json')
        assert response.status_code == 403

    def test_admin_creates_admin(self, admin_client):
        response = admin_client.post('/api/v1/accounts/admins/', ADMIN_PAYLOAD, format='json')

        assert response.status_code == 201
        assert User.objects.filter(role=RoleChoices.ADMIN).count() == 2
