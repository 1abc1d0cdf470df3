"""
Logging Sanitizer Utility

Redacts sensitive values before they reach the logs: request bodies
(passwords, reset tokens) and webhook headers (Authorization, API keys).
"""

from typing import Dict, Any, Mapping, Optional


# Fields that should never be logged
SENSITIVE_FIELDS = {
    'password',
    'password_hash',
    'confirm_password',
    'current_password',
    'new_password',
    'newpassword',
    'secret',
    'token',
    'reset_token',
    'resettoken',
    'api_key',
    'apikey',
    'x-api-key',
    'authorization',
    'proxy-authorization',
    'auth_token',
    'access_token',
    'refresh_token',
    'session_id',
    'csrf_token',
    'cookie',
}


def sanitize_dict(data: Dict[str, Any], redact_text: str = '[REDACTED]') -> Dict[str, Any]:
    """
    Sanitize a dictionary by replacing sensitive field values with redaction text.

    Args:
        data: Dictionary to sanitize
        redact_text: Text to use for redacted values (default: '[REDACTED]')

    Returns:
        Sanitized dictionary with sensitive values replaced

    Example:
        >>> sanitize_dict({'email': 'ana@empresa.com', 'password': 'secret123'})
        {'email': 'ana@empresa.com', 'password': '[REDACTED]'}
    """
    if not data:
        return data

    sanitized = {}
    for key, value in data.items():
        if str(key).lower() in SENSITIVE_FIELDS:
            sanitized[key] = redact_text
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, redact_text)
        else:
            sanitized[key] = value

    return sanitized


def sanitize_headers(headers: Optional[Mapping[str, str]], redact_text: str = '[REDACTED]') -> Dict[str, str]:
    """
    Sanitize outbound HTTP headers. Besides the known sensitive names, any
    header whose name mentions a token, key or secret is redacted.
    """
    if not headers:
        return {}

    sanitized = {}
    for name, value in headers.items():
        lowered = str(name).lower()
        if lowered in SENSITIVE_FIELDS or any(part in lowered for part in ('token', 'key', 'secret', 'signature')):
            sanitized[name] = redact_text
        else:
            sanitized[name] = value
    return sanitized


def sanitize_exception_message(exception: Exception) -> str:
    """
    Sanitize exception messages to ensure they don't contain sensitive data.
    """
    message = str(exception)

    if any(field in message.lower() for field in SENSITIVE_FIELDS):
        return f"{type(exception).__name__}: [Message contains sensitive data]"

    return message
