"""
Health check endpoints with Kubernetes-compatible semantics.

Endpoints:
- /healthz - Liveness probe (fast, no dependency checks)
- /readyz - Readiness probe (checks content calendar, cache)
"""
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET
from django.core.cache import cache
import logging

from api.application.advent_gate import wiring
from api.application.advent_gate.domain import AdventureConfigurationError

logger = logging.getLogger(__name__)


@require_GET
@csrf_exempt
def healthz(request):
    """
    Liveness probe endpoint.

    Returns 200 OK if the application process is alive.
    Does NOT check dependencies.
    """
    return JsonResponse({
        'status': 'alive',
        'service': 'adventy-backend',
    }, status=200)


@require_GET
@csrf_exempt
def readyz(request):
    """
    Readiness probe endpoint.

    Returns 200 OK only if the service can answer adventure requests:
    - Content calendar loaded and non-empty
    - Cache reachable (used by request throttling)
    """
    checks = {}
    all_healthy = True

    try:
        repository = wiring.get_adventure_repository()
        if len(repository) == 0:
            raise AdventureConfigurationError("Content calendar is empty")
        checks['content'] = 'healthy'
        checks['adventures'] = len(repository)
    except AdventureConfigurationError as e:
        logger.error(f"Content readiness check failed: {e}")
        checks['content'] = 'unhealthy'
        all_healthy = False

    try:
        cache.set('readyz_check', '1', timeout=1)
        if cache.get('readyz_check') != '1':
            raise ValueError("Cache returned unexpected value")
        checks['cache'] = 'healthy'
    except Exception as e:
        logger.error(f"Cache readiness check failed: {e}")
        checks['cache'] = 'unhealthy'
        all_healthy = False

    status_code = 200 if all_healthy else 503

    return JsonResponse({
        'status': 'ready' if all_healthy else 'not_ready',
        'service': 'adventy-backend',
        'checks': checks,
    }, status=status_code)
