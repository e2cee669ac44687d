"""
WSGI entrypoint for Mindspring.

Point a threaded WSGI server at ``wsgi:application``.
Set MINDSPRING_PROJECT_ROOT when the server does not start inside the project.
"""

from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv

PROJECT_ROOT = os.getenv("MINDSPRING_PROJECT_ROOT", "")
if not os.path.isdir(PROJECT_ROOT):
    PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Load env vars from .env if present.
load_dotenv(os.path.join(PROJECT_ROOT, ".env"))

from app import LOG_FORMAT, create_app  # noqa: E402

logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

application = create_app()
