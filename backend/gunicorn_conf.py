# backend/gunicorn_conf.py

import os

# Gunicorn config for the assistant API (memora.main:app)

wsgi_app = "memora.main:app"
bind = os.getenv("BIND", "0.0.0.0:8000")
worker_class = "uvicorn.workers.UvicornWorker"
# Live conversations are held in process memory, so clients must stick to
# one worker; scale out with sticky sessions rather than more workers here.
workers = int(os.getenv("WEB_CONCURRENCY", "1"))

# Running behind a reverse proxy
forwarded_allow_ips = "*"

# --- Logging ---
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info")
