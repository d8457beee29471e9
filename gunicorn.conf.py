"""Gunicorn configuration for production deployment."""

# Server socket
bind = '0.0.0.0:8000'

# Worker processes: SQLite serializes writers, so keep the pool small.
workers = 2
threads = 4
worker_class = 'gthread'

# Timeout covers PDF contract rendering
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logging
accesslog = '/app/logs/gunicorn-access.log'
errorlog = '/app/logs/gunicorn-error.log'
loglevel = 'info'
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = 'palapa'

# The notification worker thread starts lazily, after fork
preload_app = True

# Worker recycling
max_requests = 1000
max_requests_jitter = 50

# Security
limit_request_line = 8190
limit_request_fields = 100
limit_request_field_size = 8190


def worker_exit(server, worker):
    """Drain queued confirmation emails before a worker goes away."""
    from extensions import notifier
    notifier.shutdown()
