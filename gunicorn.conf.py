import os

wsgi_app = "src.app:create_app()"
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:5000")
workers = int(os.getenv("GUNICORN_WORKERS", 2))
worker_class = "sync"

# Recovery emails are sent inside the request, so leave room for a slow SMTP relay
timeout = int(os.getenv("GUNICORN_TIMEOUT", 30))
graceful_timeout = 10

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(L)ss request_id=%({x-request-id}o)s'

reload = os.getenv("FLASK_ENV") == "development"
