import time

from django.conf import settings
from django.db import connections
from django.db.utils import OperationalError
from django.http import JsonResponse
from kafka import KafkaAdminClient
from kafka.errors import KafkaError

from .logger import get_logger

logger = get_logger(__name__).bind(component='common', layer='health')


def _kafka_check(bootstrap_servers: str, timeout_ms: int = 500):
    started = time.time()
    client = None
    try:
        client = KafkaAdminClient(
            bootstrap_servers=bootstrap_servers.split(','),
            request_timeout_ms=timeout_ms,
            api_version_auto_timeout_ms=timeout_ms,
        )
        client.list_topics()
        latency = round((time.time() - started) * 1000, 2)
        logger.debug('Kafka health check succeeded', latency_ms=latency)
        return {'status': 'ok', 'latency_ms': latency}
    except KafkaError as e:
        logger.warning('Kafka health check failed', error=str(e))
        return {'status': 'fail', 'error': str(e)}
    finally:
        if client is not None:
            client.close()


def _db_check(alias='default'):
    started = time.time()
    try:
        conn = connections[alias]
        conn.cursor().execute('SELECT 1')
        latency = round((time.time() - started) * 1000, 2)
        logger.debug('Database health check succeeded', alias=alias, latency_ms=latency)
        return {'status': 'ok', 'latency_ms': latency}
    except OperationalError as e:
        # Expected operational DB issues (connection refused, etc.)
        logger.warning('Database health check encountered operational error', alias=alias, error=str(e))
        return {'status': 'fail', 'error': str(e)}


def live_health(request):
    """Liveness probe: process is up and can service requests."""
    logger.debug('Liveness probe served')
    return JsonResponse({'status': 'alive'})


def ready_health(request):
    """Readiness probe: verifies the database and the Kafka broker."""
    checks = {'database': _db_check()}

    bootstrap = getattr(settings, 'KAFKA_BOOTSTRAP_SERVERS', '')
    if bootstrap:
        checks['kafka'] = _kafka_check(bootstrap)
    else:
        checks['kafka'] = {'status': 'skipped', 'detail': 'KAFKA_BOOTSTRAP_SERVERS not set'}

    failing = [name for name, r in checks.items() if r.get('status') == 'fail']
    overall_status = 'ok' if not failing else 'degraded'
    http_status = 200 if not failing else 503
    payload = {
        'status': overall_status,
        'checks': checks,
    }
    logger.info('Readiness probe evaluated', status=overall_status, failing_components=failing)
    return JsonResponse(payload, status=http_status)
