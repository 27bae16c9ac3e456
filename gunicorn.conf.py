# Gunicorn configuration for HospitalFlow
import os
import sys

# Add src directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

wsgi_app = "hospitalflow.app:app"

# Server socket
bind = f"0.0.0.0:{os.environ.get('PORT', 8000)}"
backlog = 2048

# Worker processes
# Hospital state lives in process memory, so every request must reach the same worker.
workers = 1
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000
# Above the longest HMO change-feed poll window (60s).
timeout = 75
keepalive = 2

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("LOG_LEVEL", "info").lower()

# Process naming
proc_name = "hospitalflow"

# Server mechanics
preload_app = True
daemon = False
pidfile = None
user = None
group = None
tmp_upload_dir = None
