from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from fastapi import Response

# HTTP
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint']
)

# Cache
cache_hits_total = Counter('cache_hits_total', 'Total cache hits')
cache_misses_total = Counter('cache_misses_total', 'Total cache misses')

# Banco
db_queries_total = Counter('db_queries_total', 'Total database queries')

# Autenticação
auth_failures_total = Counter(
    'auth_failures_total',
    'Rejected authentication attempts',
    ['reason']
)

def metrics_endpoint():
    """Endpoint para métricas do Prometheus"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
