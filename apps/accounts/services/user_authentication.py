"""User authentication service."""

import logging

from django.db import transaction
from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def authenticate_user(*, email: str, password: str) -> User:
    """
    Authenticate an inspector with email and password.

    Args:
        email: User's email (case of the domain part is ignored)
        password: User's password

    Returns:
        Authenticated User instance with refreshed last_login

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveAccountError: If account is deactivated
    """
    email = User.objects.normalize_email(email)

    try:
        user = (
            User.objects
            .select_for_update()
            .get(email=email)
        )
    except User.DoesNotExist:
        logger.info("Login rejected for unknown email %s", email)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.check_password(password):
        logger.info("Login rejected for %s: bad password", email)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    return user
