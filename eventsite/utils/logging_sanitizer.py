"""
Logging Sanitizer Utility

Redacts credentials from submitted form data before it reaches the logs.
"""

from typing import Dict, Any, Mapping


# Form fields that should never be logged
SENSITIVE_FIELDS = {
    'password',
    'password_confirm',
    'confirm_password',
    'csrf_token',
    'secret',
    'token',
}


def sanitize_dict(data: Mapping[str, Any], redact_text: str = '[REDACTED]') -> Dict[str, Any]:
    """
    Replace the values of sensitive keys with redaction text.

    Args:
        data: Mapping to sanitize
        redact_text: Text to use for redacted values (default: '[REDACTED]')

    Returns:
        New dictionary with sensitive values replaced

    Example:
        >>> sanitize_dict({'username': 'jon', 'password': 'hunter22'})
        {'username': 'jon', 'password': '[REDACTED]'}
    """
    if not data:
        return {}

    sanitized = {}
    for key, value in data.items():
        if key.lower() in SENSITIVE_FIELDS:
            sanitized[key] = redact_text
        elif isinstance(value, Mapping):
            sanitized[key] = sanitize_dict(value, redact_text)
        else:
            sanitized[key] = value

    return sanitized


def sanitize_form_data(form_data, redact_text: str = '[REDACTED]') -> Dict[str, Any]:
    """
    Sanitize Flask request.form data for safe logging.

    Args:
        form_data: Flask request.form (ImmutableMultiDict) or any mapping
        redact_text: Text to use for redacted values

    Returns:
        Sanitized dictionary safe for logging
    """
    if hasattr(form_data, 'to_dict'):
        form_data = form_data.to_dict()
    return sanitize_dict(dict(form_data), redact_text)
