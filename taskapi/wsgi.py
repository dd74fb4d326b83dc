"""
wsgi.py — Process entry point.

    gunicorn "taskapi.wsgi:app"
    python -m taskapi.wsgi           # development server on $PORT (default 5000)

FLASK_ENV selects the config class (development, testing, production).
"""

import os

from taskapi.app import create_app

app = create_app(os.getenv("FLASK_ENV", "development"))


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
