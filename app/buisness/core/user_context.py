"""
User Directory (Core)
Provides a clean interface for account management and the approval workflow.

Handles:
- Self-registration (first account becomes an approved admin)
- Admin-created accounts (always approved)
- Authentication against the approval status
- Approve / reject / remove / password change
- Password reset tokens
"""

import secrets
from datetime import timedelta
from typing import List, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from app.buisness.errors import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    PendingApprovalError,
    RejectedError,
    SelfRemovalError,
    ValidationError,
)
from app.buisness.webhooks.events import CONTA_CRIADA, account_created_payload
from app.data.core.record_base import new_id
from app.data.core.user_info.password_validator import PasswordValidator
from app.data.core.user_info.user import User
from app.logger import get_logger
from app.utils.timestamps import utcnow

logger = get_logger("purchasing.buisness.core.user_context")


def normalize_email(email) -> str:
    """Canonical form used for storage and every lookup"""
    return (email or '').strip().lower()


class UserDirectory:
    """
    Core context for user operations.

    Args:
        repo: UsersRepo
        events: object exposing publish(event_kind, payload) (optional)
        notifier: Notifier for success messages (optional)
        reset_ttl_minutes: lifetime of password reset tokens
    """

    def __init__(self, repo, events=None, notifier=None, reset_ttl_minutes: int = 60):
        self.repo = repo
        self.events = events
        self.notifier = notifier
        self.reset_ttl_minutes = reset_ttl_minutes

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_users(self) -> List[User]:
        return self.repo.list()

    def get_user(self, user_id) -> Optional[User]:
        return self.repo.get(user_id)

    def get_user_by_email(self, email) -> Optional[User]:
        return self.repo.get_by_email(normalize_email(email))

    # ------------------------------------------------------------------
    # Account creation
    # ------------------------------------------------------------------

    def register(self, name: str, email: str, password: str) -> User:
        """
        Self-registration. The very first account is an approved admin;
        later ones are pending users.

        Raises:
            ValidationError: invalid name, email or password
            ConflictError: email already registered
        """
        first_user = self.repo.count() == 0
        role = User.ROLE_ADMIN if first_user else User.ROLE_USER
        status = User.STATUS_APPROVED if first_user else User.STATUS_PENDING

        user = self._create(name, email, password, role, status)
        if first_user:
            logger.info(f"First account registered as admin: {user.email}")
            self._notify('Cadastro realizado com sucesso! Você já pode fazer login.')
        else:
            self._notify('Cadastro realizado com sucesso! Aguarde a aprovação de um administrador.')
        return user

    def add_user(self, name: str, email: str, password: str, role: str = User.ROLE_USER) -> User:
        """
        Account created by an administrator; always approved.
        Admin-only; the caller enforces the acting user's role.
        """
        if role not in User.ROLES:
            raise ValidationError('role', f"role must be one of: {', '.join(User.ROLES)}")
        user = self._create(name, email, password, role, User.STATUS_APPROVED)
        self._notify('Usuário adicionado com sucesso!')
        return user

    def _create(self, name, email, password, role, status) -> User:
        name = (name or '').strip() if isinstance(name, str) else ''
        if not name:
            raise ValidationError('name', "Name is required")

        email = normalize_email(email)
        if not email or '@' not in email:
            raise ValidationError('email', "A valid email is required")
        self._validate_password(password)

        if self.repo.get_by_email(email) is not None:
            raise ConflictError("Email already in use")

        now = utcnow()
        user = User(
            id=new_id(),
            name=name,
            email=email,
            role=role,
            status=status,
            created_at=now,
            updated_at=now,
        )
        user.set_password(password)
        payload = account_created_payload(user)
        self.repo.add(user)
        logger.info(f"Created user: {email} (ID: {user.id}, role={role}, status={status})")

        self._publish(CONTA_CRIADA, payload)
        return user

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def authenticate(self, email: str, password: str) -> User:
        """
        Raises:
            InvalidCredentialsError: unknown email or wrong password
            PendingApprovalError: account awaits approval
            RejectedError: account was rejected
        """
        user = self.repo.get_by_email(normalize_email(email))
        if user is None or not user.check_password(password):
            logger.warning(f"Failed login attempt for {normalize_email(email)}")
            raise InvalidCredentialsError("Invalid email or password")

        if user.status == User.STATUS_PENDING:
            raise PendingApprovalError("Your account is pending administrator approval")
        if user.status == User.STATUS_REJECTED:
            raise RejectedError("Your account was rejected by an administrator")

        logger.info(f"User logged in: {user.email}")
        return user

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def approve(self, user_id) -> User:
        user = self._set_status(user_id, User.STATUS_APPROVED)
        self._notify('Usuário aprovado com sucesso')
        return user

    def reject(self, user_id) -> User:
        user = self._set_status(user_id, User.STATUS_REJECTED)
        self._notify('Usuário rejeitado')
        return user

    def _set_status(self, user_id, status) -> User:
        user = self._get_or_raise(user_id)
        if user.status != status:
            previous = user.status
            user.status = status
            user.updated_at = utcnow()
            self.repo.save(user)
            logger.info(f"User {user.email} status changed: {previous} -> {status}")
        return user

    def remove_user(self, user_id, acting_user_id) -> None:
        """
        Raises:
            SelfRemovalError: a user tried to remove their own account
            NotFoundError: unknown id
        """
        if user_id == acting_user_id:
            raise SelfRemovalError("Você não pode remover seu próprio usuário")

        user = self._get_or_raise(user_id)
        if user.is_admin and self.repo.count_admins() <= 1:
            logger.warning(f"Removing the last admin account: {user.email}")

        email = user.email
        self.repo.delete(user_id)
        logger.info(f"User removed: {email} by {acting_user_id}")
        self._notify('Usuário removido com sucesso')

    def change_password(self, user_id, new_password: str) -> None:
        """Direct overwrite; no current-password check"""
        user = self._get_or_raise(user_id)
        self._validate_password(new_password)
        user.set_password(new_password)
        user.updated_at = utcnow()
        self.repo.save(user)
        logger.info(f"Password changed for user {user.email}")
        self._notify('Senha alterada com sucesso')

    # ------------------------------------------------------------------
    # Password reset
    # ------------------------------------------------------------------

    def request_password_reset(self, email: str) -> str:
        """
        Issue a single-use reset token. Only its hash is stored.

        Returns:
            The plain token, to be sent to the user out of band

        Raises:
            NotFoundError: email not registered
        """
        user = self.repo.get_by_email(normalize_email(email))
        if user is None:
            raise NotFoundError("Email not found")

        token = secrets.token_urlsafe(32)
        user.reset_token_hash = generate_password_hash(token)
        user.reset_token_expires_at = utcnow() + timedelta(minutes=self.reset_ttl_minutes)
        self.repo.save(user)
        logger.info(f"Password reset requested for {user.email}")
        return token

    def verify_reset_token(self, email: str, token: str) -> bool:
        user = self.repo.get_by_email(normalize_email(email))
        return self._token_matches(user, token)

    def complete_password_reset(self, email: str, token: str, new_password: str) -> None:
        """
        Raises:
            ValidationError: token invalid or expired, or password rejected
        """
        user = self.repo.get_by_email(normalize_email(email))
        if not self._token_matches(user, token):
            raise ValidationError('token', "Invalid or expired reset token")
        self._validate_password(new_password)

        user.set_password(new_password)
        user.reset_token_hash = None
        user.reset_token_expires_at = None
        user.updated_at = utcnow()
        self.repo.save(user)
        logger.info(f"Password reset completed for {user.email}")
        self._notify('Senha redefinida com sucesso')

    @staticmethod
    def _token_matches(user, token) -> bool:
        if user is None or not token or not user.reset_token_hash:
            return False
        if user.reset_token_expires_at is None or user.reset_token_expires_at < utcnow():
            return False
        return check_password_hash(user.reset_token_hash, token)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_or_raise(self, user_id) -> User:
        user = self.repo.get(user_id)
        if user is None:
            raise NotFoundError("Usuário não encontrado")
        return user

    @staticmethod
    def _validate_password(password):
        is_valid, message = PasswordValidator.validate(password)
        if not is_valid:
            raise ValidationError('password', message)

    def _publish(self, event_kind, payload):
        if self.events is None:
            return
        try:
            self.events.publish(event_kind, payload)
        except Exception as e:
            logger.error(f"Webhook publish failed for {event_kind}: {e}")

    def _notify(self, message):
        if self.notifier is not None:
            self.notifier.success(message)
