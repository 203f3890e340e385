"""Gunicorn configuration file."""

import logging
import multiprocessing
import os

from prometheus_client import multiprocess

from kubeguard.env import ENVIRONMENT

PORT = ENVIRONMENT.get_value("PORT", default="8080")

bind = f"0.0.0.0:{PORT}"

cpu_resources = int(os.environ.get("POD_CPU_LIMIT", multiprocessing.cpu_count()))
workers = cpu_resources * int(os.environ.get("GUNICORN_WORKER_MULTIPLIER", 2))
threads = int(os.environ.get("GUNICORN_THREAD_LIMIT", 10))

# Requests are given the same 15 second budget as in-flight work on shutdown.
timeout = 15
graceful_timeout = 15
keepalive = 60

logger = logging.getLogger(__name__)


def on_starting(server):
    """Log the listening address before workers start."""
    logger.info(f"Running server on {bind} with {workers} worker(s)")


def child_exit(server, worker):
    """Watches for workers to exit and marks them as dead in prometheus."""
    # See: https://prometheus.github.io/client_python/multiprocess/
    multiprocess.mark_process_dead(worker.pid)
