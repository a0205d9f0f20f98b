import os


# Resolution is CPU-light and stateless; a couple of workers is plenty.
wsgi_app = os.getenv("TD_APP", "tripdates.main:app")
bind = os.getenv("TD_BIND", "0.0.0.0:8080")
workers = int(os.getenv("WEB_CONCURRENCY", "2"))
worker_class = "uvicorn.workers.UvicornWorker"
timeout = int(os.getenv("TD_TIMEOUT", "15"))

accesslog = "-"
errorlog = "-"
loglevel = os.getenv("TD_LOGLEVEL", "info")
