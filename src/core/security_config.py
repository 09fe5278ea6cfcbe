"""Security configuration constants for the EventMinds API.

Keys listed here are redacted by `StructuredLogger` and the error envelope
fields are filtered per environment by `global_exception_handler`.
"""

# Matched as case-insensitive substrings of a log field or header name
SENSITIVE_KEYS: set[str] = {
    # Credentials for the model provider and the database
    "api_key",
    "api-key",
    "x-goog-api-key",
    "key",
    "secret",
    "password",
    "token",
    "authorization",
    "bearer",
    "database_url",
    "cookie",
    # Vendor contact details
    "email",
    "phone",
    "phone_number",
    "contact",
    "address",
}

# In production, error responses only contain these fields
PRODUCTION_ERROR_FIELDS: set[str] = {
    "correlation_id",
    "type",
}

# Extra diagnostics allowed outside production
DEVELOPMENT_ERROR_FIELDS: set[str] = PRODUCTION_ERROR_FIELDS | {
    "details",
    "traceback",
    "exception_type",
    "validation_errors",
}


def get_allowed_error_fields(environment: str) -> set[str]:
    """Get allowed error response fields based on environment.

    Args:
        environment: The application environment (production, development, test)

    Returns:
        Set of allowed field names for error responses
    """
    if environment == "production":
        return PRODUCTION_ERROR_FIELDS.copy()
    return DEVELOPMENT_ERROR_FIELDS.copy()


def is_sensitive_key(key: str) -> bool:
    """True when `key` names a value that must never reach the logs."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in SENSITIVE_KEYS)
