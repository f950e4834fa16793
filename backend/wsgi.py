# backend/wsgi.py
from cloudbill import create_app

app = create_app()
