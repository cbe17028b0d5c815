"""
Mailer Constants

Form field names, result codes and user-facing failure messages for the
photo email sub-flow. Endpoint, wording and image limits live in
config/settings.py.
"""

from enum import Enum

# =============================================================================
# MULTIPART FORM
# =============================================================================

FIELD_TO = "to"
FIELD_SUBJECT = "subject"
FIELD_TEXT = "text"
FIELD_ATTACHMENTS = "attachments"

JPEG_CONTENT_TYPE = "image/jpeg"

# Key of the JSON response body checked for the success message
RESPONSE_MESSAGE_KEY = "message"

# =============================================================================
# SEND STATUS
# =============================================================================


class SendStatus(Enum):
    """Email send operation status codes"""

    SUCCESS = "success"
    NETWORK_ERROR = "network_error"  # Transport failed before a response
    HTTP_ERROR = "http_error"  # Non-200 response
    UNEXPECTED_RESPONSE = "unexpected_response"  # 200 without success message
    INVALID_INPUT = "invalid_input"  # No recipient or no images


# =============================================================================
# FAILURE MESSAGES (shown in the email dialog)
# =============================================================================

NETWORK_ERROR_MESSAGE = "Network error: {error}"
HTTP_ERROR_MESSAGE = "Email API failed. Status: {status}"
UNEXPECTED_RESPONSE_MESSAGE = "Unexpected API response."
NO_RECIPIENT_OR_IMAGES_MESSAGE = "No email or images to send."

# Validation messages for the email field
EMPTY_EMAIL_MESSAGE = "Email cannot be empty"
INVALID_EMAIL_MESSAGE = "Invalid email format"
