import hmac
import threading
import time
from datetime import datetime, timezone
from functools import wraps
from typing import Dict, Optional, Tuple

from flask import current_app, g, request

from arcade.errors import RateLimited, Unauthorized


class RateLimiter:
    """Fixed-window request counter keyed by caller address.

    Counters live in process memory and are owned by the Flask app
    (``app.extensions['rate_limiter']``); they are not shared between
    workers and reset on restart.
    """

    def __init__(self, window_sec: int = 900, max_requests: int = 100):
        self.window_sec = window_sec
        self.max_requests = max_requests
        self._counters: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str, now: Optional[float] = None):
        """Count one request for ``key``.

        Returns ``(allowed, remaining, reset_at)`` where ``reset_at`` is the
        epoch second the current window ends.
        """
        now = time.time() if now is None else now
        with self._lock:
            self._evict_expired(now)
            count, reset_at = self._counters.get(key, (0, now + self.window_sec))
            if reset_at <= now:
                count, reset_at = 0, now + self.window_sec
            if count >= self.max_requests:
                return False, 0, reset_at
            count += 1
            self._counters[key] = (count, reset_at)
            return True, self.max_requests - count, reset_at

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, (_, reset_at) in self._counters.items() if reset_at <= now]
        for key in expired:
            del self._counters[key]


def client_address() -> str:
    forwarded = request.headers.get('X-Forwarded-For', '')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.headers.get('X-Real-IP') or request.remote_addr or 'unknown'


def admin_required(view):
    """Require the X-Admin-Code header to match the configured admin code."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_app.config.get('REQUIRE_ADMIN_HEADER', True):
            expected = current_app.config.get('ADMIN_ACCESS_CODE') or ''
            provided = request.headers.get('X-Admin-Code', '')
            if not expected or not hmac.compare_digest(provided.encode(), expected.encode()):
                raise Unauthorized('Admin access required')
        return view(*args, **kwargs)
    return wrapper


SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'DENY',
    'X-XSS-Protection': '1; mode=block',
    'Referrer-Policy': 'strict-origin-when-cross-origin',
    'Permissions-Policy': 'camera=(), microphone=(), geolocation=()',
}


def init_middleware(flask_app):
    flask_app.extensions['rate_limiter'] = RateLimiter(
        window_sec=int(flask_app.config.get('RATE_LIMIT_WINDOW_SEC', 900)),
        max_requests=int(flask_app.config.get('RATE_LIMIT_MAX_REQUESTS', 100)),
    )

    @flask_app.before_request
    def log_and_limit():
        g.request_started = time.perf_counter()
        current_app.logger.info(f"[request] {request.method} {request.path} ip={client_address()}")
        if not current_app.config.get('RATE_LIMIT_ENABLED') or request.method == 'OPTIONS':
            return None
        if not request.path.startswith('/api/'):
            return None
        limiter = current_app.extensions['rate_limiter']
        allowed, remaining, reset_at = limiter.hit(client_address())
        g.rate_limit = (remaining, reset_at)
        if not allowed:
            retry_after = max(1, int(reset_at - time.time() + 0.999))
            current_app.logger.warning(f"[rate-limit] {client_address()} exceeded {limiter.max_requests} requests")
            raise RateLimited(details={'retryAfter': retry_after})
        return None

    @flask_app.after_request
    def decorate_response(response):
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        if current_app.config.get('APP_ENV') == 'production' and request.is_secure:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        rate = g.get('rate_limit')
        if rate is not None:
            remaining, reset_at = rate
            limiter = current_app.extensions['rate_limiter']
            response.headers['X-RateLimit-Limit'] = str(limiter.max_requests)
            response.headers['X-RateLimit-Remaining'] = str(remaining)
            response.headers['X-RateLimit-Reset'] = datetime.fromtimestamp(reset_at, tz=timezone.utc).isoformat()
        started = g.get('request_started')
        if started is not None:
            duration_ms = (time.perf_counter() - started) * 1000.0
            current_app.logger.info(f"[response] {request.method} {request.path} - {response.status_code} ({duration_ms:.0f}ms)")
        return response
