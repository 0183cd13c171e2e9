import os

# app.main reads settings at import time
os.environ.setdefault("GOODREADS_API_KEY", "test-key")
os.environ.setdefault("GOODREADS_BASE_URL", "https://goodreads.test")
