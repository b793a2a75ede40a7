# backend/urls.py - PROJECT URLS
"""
Main URL configuration for the Adventy backend.
"""

from django.urls import path, include

from api.views.health import healthz, readyz

urlpatterns = [
    # API routes
    path('api/', include('api.urls')),

    # Kubernetes probes
    path('healthz', healthz, name='healthz'),
    path('readyz', readyz, name='readyz'),

    # Prometheus metrics (/metrics)
    path('', include('django_prometheus.urls')),
]

# URL structure overview for frontend developers:
"""
Adventures:
- GET /api/adventures/?searchDateTime=YYYY-MM-DD   - Open the adventure of a day
      Headers: X-Timezone (IANA id, required)
               Adventy-SkipSearchDateInRangeValidationSecret (optional)
               Adventy-SkipSearchDateHasNotAppearedValidationSecret (optional)
               Adventy-SkipSearchDatePassedValidationSecret (optional)
- GET /api/adventures/calendar/?showPast=true      - Campaign days for the caller's time zone
      Headers: X-Timezone (IANA id, required)

Monitoring:
- GET /healthz                    - Liveness probe
- GET /readyz                     - Readiness probe
- GET /metrics                    - Prometheus metrics
"""
