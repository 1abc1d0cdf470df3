"""
Password policy
"""

import pytest

from app.data.core.user_info.password_validator import PasswordValidator


@pytest.mark.parametrize('password, should_pass', [
    ('', False),
    (None, False),
    ('short', False),
    ('a' * 129, False),
    ('123456', True),
    ('user123', True),
])
def test_default_policy(password, should_pass):
    is_valid, error_msg = PasswordValidator.validate(password)
    assert is_valid is should_pass
    assert bool(error_msg) is not should_pass


def test_requirements_text_mentions_minimum_length():
    assert str(PasswordValidator.MIN_LENGTH) in PasswordValidator.get_requirements_text()
