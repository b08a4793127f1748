"""
Entry point for the self-investment Flask application.

Run with:
    python wsgi.py

Or with a production WSGI server:
    gunicorn -w 4 wsgi:application
"""

from selfinvest import create_app

application = create_app()

if __name__ == "__main__":
    application.run(host="0.0.0.0", port=5000, debug=False)
