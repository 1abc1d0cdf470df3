from flask import current_app
from app import db, login_manager
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import UserMixin
from app.data.core.record_base import RecordBase
from app.utils.timestamps import utcnow


class User(UserMixin, RecordBase):
    __tablename__ = 'users'
    __hidden_fields__ = ('password_hash', 'reset_token_hash', 'reset_token_expires_at')

    ROLE_ADMIN = 'admin'
    ROLE_USER = 'user'
    ROLES = (ROLE_ADMIN, ROLE_USER)

    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)

    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(10), nullable=False, default=ROLE_USER)
    status = db.Column(db.String(10), nullable=False, default=STATUS_PENDING)
    reset_token_hash = db.Column(db.String(255), nullable=True)
    reset_token_expires_at = db.Column(db.DateTime, nullable=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash or password is None:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    @property
    def is_active(self):
        return self.status == self.STATUS_APPROVED

    def __repr__(self):
        return f'<User {self.email}>'


@login_manager.user_loader
def load_user(user_id):
    return current_app.extensions['purchasing'].users.get_user(user_id)
