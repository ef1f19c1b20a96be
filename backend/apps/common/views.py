from django.http import JsonResponse
from django.db import connections
from django.db.utils import OperationalError
import time
from .logger import get_logger

logger = get_logger(__name__).bind(component='common', layer='health')


def _db_check(alias='default'):
    started = time.time()
    try:
        conn = connections[alias]
        with conn.cursor() as cursor:
            cursor.execute('SELECT 1')
        latency = round((time.time() - started) * 1000, 2)
        logger.debug('Database health check succeeded', alias=alias, latency_ms=latency)
        return {'status': 'ok', 'latency_ms': latency}
    except OperationalError as e:
        logger.warning('Database health check encountered operational error', alias=alias, error=str(e))
        return {'status': 'fail', 'error': str(e)}
    except Exception as e:  # broaden for unexpected exceptions (mocked failures, driver bugs)
        logger.error('Database health check failed unexpectedly', alias=alias, error=str(e), exception=e.__class__.__name__)
        return {'status': 'fail', 'error': str(e), 'exception': e.__class__.__name__}


def _cart_table_check(alias='default'):
    """The carts table is created on first use, so absence is reported but never fails readiness."""
    from apps.carts.container import build_cart_store

    try:
        exists = build_cart_store(alias).table_exists()
    except Exception as e:
        logger.warning('Cart table inspection failed', alias=alias, error=str(e))
        return {'status': 'unknown', 'error': str(e)}
    return {'status': 'ok' if exists else 'pending'}


def live_health(request):
    """Liveness probe: process is up and can service requests."""
    logger.debug('Liveness probe served')
    return JsonResponse({'status': 'alive'})


def ready_health(request):
    """Readiness probe: verifies the database and reports cart table provisioning."""
    checks = {}
    db_result = _db_check()
    checks['database'] = db_result
    if db_result.get('status') == 'ok':
        checks['carts_table'] = _cart_table_check()
    else:
        checks['carts_table'] = {'status': 'skipped', 'detail': 'database unavailable'}

    failing = [name for name, r in checks.items() if r.get('status') == 'fail']
    overall_status = 'ok' if not failing else 'degraded'
    http_status = 200 if not failing else 503
    payload = {
        'status': overall_status,
        'checks': checks,
    }
    logger.info('Readiness probe evaluated', status=overall_status, failing_components=failing)
    return JsonResponse(payload, status=http_status)
