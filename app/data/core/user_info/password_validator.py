"""
Password validation utility
"""


class PasswordValidator:
    """Password policy applied on register, add, change and reset"""

    MIN_LENGTH = 6
    MAX_LENGTH = 128

    @classmethod
    def validate(cls, password):
        """
        Validate password length

        Args:
            password (str): The password to validate

        Returns:
            tuple: (is_valid, error_message)
                is_valid (bool): True if password meets all requirements
                error_message (str): Error message if validation fails, empty string if valid
        """
        if not password or not isinstance(password, str):
            return False, "Password is required"

        if len(password) < cls.MIN_LENGTH:
            return False, f"Password must be at least {cls.MIN_LENGTH} characters"

        if len(password) > cls.MAX_LENGTH:
            return False, f"Password must be less than {cls.MAX_LENGTH} characters"

        return True, ""

    @classmethod
    def get_requirements_text(cls):
        """Human-readable policy, served to the registration and reset forms"""
        return f"Password must be between {cls.MIN_LENGTH} and {cls.MAX_LENGTH} characters long"
