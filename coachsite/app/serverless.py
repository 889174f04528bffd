"""Serverless entrypoint for deploying the Flask app."""
from __future__ import annotations
import os

from coachsite.app import create_app

app = create_app(os.getenv("FLASK_ENV", "production"))
