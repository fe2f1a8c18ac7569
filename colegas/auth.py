"""User registration and password checks."""

import hashlib
import hmac
import logging
import secrets
from typing import Any

from .config import get_password_iterations
from .exceptions import AuthenticationError, ConflictError, PermissionDeniedError, ValidationError
from .schemas import RegisterRequest, User, UserUpdate
from .store import LeagueStore, find_user, find_user_by_username, next_id
from .utils import parse_payload

logger = logging.getLogger('colegas.auth')

HASH_ALGORITHM = 'pbkdf2_sha256'


def hash_password(password: str, salt: str | None = None, iterations: int | None = None) -> str:
    """Hash a password as 'pbkdf2_sha256$iterations$salt$hexdigest'."""
    salt = salt or secrets.token_hex(16)
    iterations = iterations or get_password_iterations()
    digest = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt.encode('utf-8'), iterations)
    return f'{HASH_ALGORITHM}${iterations}${salt}${digest.hex()}'


def verify_password(password: str, password_hash: str) -> bool:
    try:
        algorithm, iterations, salt, _ = password_hash.split('$')
        iterations = int(iterations)
    except ValueError:
        return False
    if algorithm != HASH_ALGORITHM or iterations <= 0:
        return False
    expected = hash_password(password, salt=salt, iterations=iterations)
    return hmac.compare_digest(expected, password_hash)


def register_user(store: LeagueStore, payload: RegisterRequest | dict[str, Any]) -> User:
    """
    Create a user account.

    Raises:
        ValidationError: If the payload is malformed
        ConflictError: If the username or email is already taken
    """
    request = parse_payload(RegisterRequest, payload)

    with store.transaction() as db:
        for user in db.users:
            if user.username == request.username or user.email.lower() == request.email.lower():
                raise ConflictError('Username or email already in use')

        user = User(
            id=next_id(db, 'user'),
            username=request.username,
            email=request.email,
            password_hash=hash_password(request.password),
        )
        db.users.append(user)

    logger.info(f'Registered user {user.username} (id={user.id})')
    return user


def authenticate(store: LeagueStore, username: str | None, password: str | None) -> User:
    """
    Check a username/password pair.

    Raises:
        AuthenticationError: On missing or wrong credentials
    """
    if not username or not password:
        raise AuthenticationError('Missing username or password')

    user = find_user_by_username(store.snapshot(), username)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning(f'Failed login for {username}')
        raise AuthenticationError('Invalid username or password')
    return user


def change_password(store: LeagueStore, user_id: int, old_password: str, new_password: str) -> None:
    """Replace a user's password after checking the current one."""
    if len(new_password) < 6:
        raise ValidationError('New password must be at least 6 characters')

    with store.transaction() as db:
        user = find_user(db, user_id)
        if not verify_password(old_password, user.password_hash):
            raise AuthenticationError('Current password is incorrect')
        user.password_hash = hash_password(new_password)


def user_profile(user: User) -> dict[str, Any]:
    return {'id': user.id, 'username': user.username, 'email': user.email}


def get_user(store: LeagueStore, user_id: int) -> dict[str, Any]:
    """Public profile of any user. The password hash never leaves the store."""
    return user_profile(find_user(store.snapshot(), user_id))


def update_user(
    store: LeagueStore,
    user_id: int,
    payload: UserUpdate | dict[str, Any],
    requesting_user_id: int,
) -> dict[str, Any]:
    """
    Edit the requester's own profile fields.

    Raises:
        PermissionDeniedError: If the requester is not the user being edited
        NotFoundError: If the user doesn't exist
        ConflictError: If the new username or email belongs to someone else
        ValidationError: If the payload is malformed
    """
    if user_id != requesting_user_id:
        raise PermissionDeniedError('Users can only update their own profile')

    update = parse_payload(UserUpdate, payload)

    with store.transaction() as db:
        user = find_user(db, user_id)
        for other in db.users:
            if other.id == user_id:
                continue
            if update.username is not None and other.username == update.username:
                raise ConflictError('Username already in use')
            if update.email is not None and other.email.lower() == update.email.lower():
                raise ConflictError('Email already in use')

        if update.username is not None:
            user.username = update.username
        if update.email is not None:
            user.email = update.email
        if update.password is not None:
            user.password_hash = hash_password(update.password)
        profile = user_profile(user)

    logger.info(f'Updated profile of user {user_id}')
    return profile
