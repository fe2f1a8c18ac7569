"""Tests for registration and password checks."""

import pytest

from colegas.auth import (
    authenticate,
    change_password,
    get_user,
    hash_password,
    register_user,
    update_user,
    verify_password,
)
from colegas.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)


def payload(username='alice', email='alice@example.com', password='secret123'):
    return {'username': username, 'email': email, 'password': password}


class TestPasswordHashing:
    def test_round_trip(self):
        hashed = hash_password('hunter22', iterations=1000)
        assert hashed.startswith('pbkdf2_sha256$1000$')
        assert verify_password('hunter22', hashed)
        assert not verify_password('hunter23', hashed)

    def test_salted(self):
        assert hash_password('hunter22') != hash_password('hunter22')

    def test_malformed_hash(self):
        assert not verify_password('hunter22', 'plaintext')
        assert not verify_password('hunter22', 'md5$1$salt$abc')

    def test_non_integer_iterations(self):
        """Test a corrupt iteration count fails the check instead of raising."""
        assert not verify_password('hunter22', 'pbkdf2_sha256$abc$salt$00ff')
        assert not verify_password('hunter22', 'pbkdf2_sha256$$salt$00ff')
        assert not verify_password('hunter22', 'pbkdf2_sha256$0$salt$00ff')


class TestRegister:
    def test_register_and_login(self, store):
        user = register_user(store, payload())
        assert user.id == 1
        assert user.password_hash != 'secret123'
        assert authenticate(store, 'alice', 'secret123').id == user.id

    def test_duplicate_username(self, store):
        register_user(store, payload())
        with pytest.raises(ConflictError):
            register_user(store, payload(email='other@example.com'))

    def test_duplicate_email_case_insensitive(self, store):
        register_user(store, payload())
        with pytest.raises(ConflictError):
            register_user(store, payload(username='alice2', email='ALICE@example.com'))

    @pytest.mark.parametrize('bad', [
        payload(username='al'),
        payload(email='not-an-email'),
        payload(password='123'),
    ])
    def test_invalid_payload(self, store, bad):
        with pytest.raises(ValidationError):
            register_user(store, bad)


class TestAuthenticate:
    def test_wrong_password(self, store):
        register_user(store, payload())
        with pytest.raises(AuthenticationError):
            authenticate(store, 'alice', 'wrong-password')

    def test_unknown_user(self, store):
        with pytest.raises(AuthenticationError):
            authenticate(store, 'nobody', 'secret123')

    def test_missing_credentials(self, store):
        with pytest.raises(AuthenticationError):
            authenticate(store, None, None)


class TestChangePassword:
    def test_change(self, store):
        user = register_user(store, payload())
        change_password(store, user.id, 'secret123', 'brand-new')
        assert authenticate(store, 'alice', 'brand-new').id == user.id
        with pytest.raises(AuthenticationError):
            authenticate(store, 'alice', 'secret123')

    def test_wrong_current_password(self, store):
        user = register_user(store, payload())
        with pytest.raises(AuthenticationError):
            change_password(store, user.id, 'nope', 'brand-new')

    def test_short_new_password(self, store):
        user = register_user(store, payload())
        with pytest.raises(ValidationError):
            change_password(store, user.id, 'secret123', '123')


class TestUserProfile:
    def test_get_user_hides_hash(self, store):
        user = register_user(store, payload())
        assert get_user(store, user.id) == {'id': user.id, 'username': 'alice', 'email': 'alice@example.com'}

    def test_get_unknown_user(self, store):
        with pytest.raises(NotFoundError):
            get_user(store, 99)

    def test_update_all_fields(self, store):
        user = register_user(store, payload())
        profile = update_user(
            store, user.id,
            {'username': 'alicia', 'email': 'alicia@example.com', 'password': 'brand-new'},
            requesting_user_id=user.id,
        )
        assert profile == {'id': user.id, 'username': 'alicia', 'email': 'alicia@example.com'}
        assert authenticate(store, 'alicia', 'brand-new').id == user.id
        with pytest.raises(AuthenticationError):
            authenticate(store, 'alicia', 'secret123')

    def test_partial_update_keeps_other_fields(self, store):
        user = register_user(store, payload())
        update_user(store, user.id, {'email': 'new@example.com'}, requesting_user_id=user.id)
        assert authenticate(store, 'alice', 'secret123').email == 'new@example.com'

    def test_keeping_own_username_is_not_a_conflict(self, store):
        user = register_user(store, payload())
        profile = update_user(store, user.id, {'username': 'alice'}, requesting_user_id=user.id)
        assert profile['username'] == 'alice'

    def test_cannot_update_someone_else(self, store):
        alice = register_user(store, payload())
        bob = register_user(store, payload(username='bob', email='bob@example.com'))
        with pytest.raises(PermissionDeniedError):
            update_user(store, alice.id, {'username': 'hacked'}, requesting_user_id=bob.id)
        assert get_user(store, alice.id)['username'] == 'alice'

    def test_username_taken(self, store):
        register_user(store, payload())
        bob = register_user(store, payload(username='bob', email='bob@example.com'))
        with pytest.raises(ConflictError):
            update_user(store, bob.id, {'username': 'alice'}, requesting_user_id=bob.id)

    def test_email_taken_case_insensitive(self, store):
        register_user(store, payload())
        bob = register_user(store, payload(username='bob', email='bob@example.com'))
        with pytest.raises(ConflictError):
            update_user(store, bob.id, {'email': 'Alice@Example.com'}, requesting_user_id=bob.id)
        assert get_user(store, bob.id)['email'] == 'bob@example.com'

    @pytest.mark.parametrize('bad', [
        {'username': 'al'},
        {'email': 'nope'},
        {'password': '123'},
        {'role': 'ADMIN'},
    ])
    def test_invalid_update(self, store, bad):
        user = register_user(store, payload())
        with pytest.raises(ValidationError):
            update_user(store, user.id, bad, requesting_user_id=user.id)
