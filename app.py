"""Hugging Face Spaces entry point."""

from blast_sequence.utils.logging import configure_logging
from blast_sequence.visualization.dash_app import app

server = app.server  # expose Flask server for gunicorn fallback

if __name__ == "__main__":
    import os
    configure_logging()
    port = int(os.environ.get("PORT", 7860))
    app.run(host="0.0.0.0", debug=False, port=port)
