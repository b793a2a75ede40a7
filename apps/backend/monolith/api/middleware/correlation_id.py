"""
Correlation ID middleware for request tracing.

Every adventure request gets a request ID (taken from X-Request-ID or
generated), which is attached to log records and echoed back to the caller
so support can match a user report with gate decisions in the logs.
"""
import uuid

from .logging_filter import set_correlation_id, clear_correlation_id

REQUEST_ID_HEADER = 'X-Request-ID'
MAX_REQUEST_ID_LENGTH = 128


class CorrelationIDMiddleware:
    """
    - Reads X-Request-ID from the incoming request (ignored if oversized)
    - Generates a UUID4 if absent
    - Stores it on request.correlation_id and in thread-local for logging
    - Returns it in the X-Request-ID response header
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.META.get('HTTP_X_REQUEST_ID', '').strip()
        if not request_id or len(request_id) > MAX_REQUEST_ID_LENGTH:
            request_id = str(uuid.uuid4())

        request.correlation_id = request_id
        set_correlation_id(request_id)
        try:
            response = self.get_response(request)
            response[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            # Always clear thread-local to prevent leakage between requests
            clear_correlation_id()
