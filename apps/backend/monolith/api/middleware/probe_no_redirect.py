"""
Middleware to bypass SSL redirect for internal probe and scrape endpoints.

kubelet probes and the Prometheus scraper hit pods directly over plain HTTP,
so with SECURE_SSL_REDIRECT=True they would receive 301s. Requests to these
paths are marked as secure before SecurityMiddleware sees them.

MUST be placed BEFORE django.middleware.security.SecurityMiddleware.
"""

INTERNAL_PATHS = frozenset({'/healthz', '/readyz', '/metrics'})


class ProbeNoRedirectMiddleware:

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.path in INTERNAL_PATHS:
            # Header checked by SECURE_PROXY_SSL_HEADER
            request.META['HTTP_X_FORWARDED_PROTO'] = 'https'

        return self.get_response(request)
