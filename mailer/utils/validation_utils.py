"""
Validation Utilities

Email address validation for the email dialog.
"""

import re
from typing import Optional

from mailer.constants import EMPTY_EMAIL_MESSAGE, INVALID_EMAIL_MESSAGE

# local-part @ domain . TLD (2-64 letters)
EMAIL_PATTERN = re.compile(r"[A-Z0-9a-z._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,64}")


def is_valid_email(email: str) -> bool:
    """
    Check an address against the booth's email format.

    The whole string must match; surrounding text is not accepted.

    Example:
        is_valid_email("guest@example.com")  # True
        is_valid_email("guest@example")      # False
    """
    if not email:
        return False
    return EMAIL_PATTERN.fullmatch(email) is not None


def validate_email(email: str) -> Optional[str]:
    """
    Validate an address for display in the dialog.

    Returns:
        User-facing error message, or None if the address is valid
    """
    if not email or not email.strip():
        return EMPTY_EMAIL_MESSAGE
    if not is_valid_email(email.strip()):
        return INVALID_EMAIL_MESSAGE
    return None
