"""
Gunicorn Configuration

Uvicorn workers under Gunicorn for the Order Analytics API.
"""

import multiprocessing
import os

bind = f"{os.getenv('API_HOST', '0.0.0.0')}:{os.getenv('API_PORT', '8000')}"
backlog = 2048

# Report windowing can fan out to a thread pool per request; keep process count modest
workers = int(os.getenv("API_WORKERS", multiprocessing.cpu_count() + 1))
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 10000
max_requests_jitter = 1000
timeout = 60
keepalive = 5
graceful_timeout = 30

proc_name = "order-analytics-api"

errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
accesslog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(D)s'


def post_fork(server, worker):
    """Each worker opens its own database engine in the app lifespan."""
    server.log.info("Worker spawned (pid: %s)", worker.pid)
