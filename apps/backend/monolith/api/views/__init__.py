"""
API Views Package.

- adventures: adventure and campaign calendar endpoints
- health: Kubernetes liveness/readiness probes
"""
