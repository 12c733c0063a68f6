"""
Development entrypoint: `python -m api`.
In production run create_app() behind a WSGI server (gunicorn/uwsgi).
"""
import os
from . import create_app

# APP_ENV/FLASK_ENV pick the configuration class (see get_config())
app = create_app()

if __name__ == "__main__":
    host = os.getenv("FLASK_RUN_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_RUN_PORT", "8080"))
    debug = bool(os.getenv("FLASK_DEBUG", str(app.config.get("DEBUG", True))).lower() in ("1", "true", "yes"))
    app.run(host=host, port=port, debug=debug)
