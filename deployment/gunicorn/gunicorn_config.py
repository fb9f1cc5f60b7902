import multiprocessing
import os

bind = os.getenv("GUNICORN_BIND", "unix:/run/farm-records/gunicorn.sock")
workers = int(os.getenv("GUNICORN_WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "sync"
worker_tmp_dir = "/dev/shm"
max_requests = 1000
max_requests_jitter = 100
# Report exports render PDFs in-process
timeout = int(os.getenv("GUNICORN_TIMEOUT", 120))
keepalive = 5

# Logging
accesslog = os.getenv("GUNICORN_ACCESS_LOG", "-")
errorlog = os.getenv("GUNICORN_ERROR_LOG", "-")
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(a)s" %(D)s'

# Process naming
proc_name = "farm-records"

# Server mechanics
daemon = False
umask = 0o007


def when_ready(server):
    server.log.info("Farm records API ready, spawning %s workers", workers)


def worker_abort(worker):
    """Called when a worker times out, usually a slow report export."""
    worker.log.warning("Worker %s aborted", worker.pid)
