# nexttogo_service/user_friendly_errors.py

"""
Centralized dictionary for mapping feed failures to user-friendly messages.
"""

from .core.exceptions import FeedError

ERROR_MAP = {
    "invalid_endpoint": {
        "message": "The race feed address is misconfigured.",
        "suggestion": "Check that FEED_URL in your .env file is a valid http(s) URL.",
    },
    "invalid_transport_response": {
        "message": "The race feed sent back a response that could not be read.",
        "suggestion": "This is usually temporary. The list will refresh automatically.",
    },
    "http_status": {
        "message": "The race feed is currently unavailable.",
        "suggestion": "This is usually temporary. The list will refresh automatically once the feed recovers.",
    },
    "decoding_failure": {
        "message": "The race feed returned data in an unexpected format.",
        "suggestion": "The feed may have changed. Please check the application logs for details.",
    },
    "unknown_category": {
        "message": "That race category does not exist.",
        "suggestion": "Use one of the ids listed by /api/categories.",
    },
    "invalid_request": {
        "message": "The request body could not be understood.",
        "suggestion": "Send a JSON body such as {\"categories\": [\"<category id>\"]}.",
    },
    "default": {
        "message": "An unexpected error occurred while loading races.",
        "suggestion": "Please check the application logs for more details.",
    },
}


def describe_error(kind: str, details=None) -> dict:
    """Returns the message, suggestion and technical details for an error kind."""
    info = ERROR_MAP.get(kind, ERROR_MAP["default"])
    return {
        "kind": kind,
        "message": info["message"],
        "suggestion": info["suggestion"],
        "details": details,
    }


def describe_feed_error(error: FeedError) -> dict:
    return describe_error(error.kind.value, str(error))
