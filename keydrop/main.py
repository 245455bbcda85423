"""
main.py

Development entry point. Production deployments serve ``keydrop.main:app``
from a WSGI server instead.
"""

import os

from keydrop.app_factory import create_app

app = create_app()


def run() -> None:
    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 3000))
    debug = os.getenv("FLASK_DEBUG", "false").lower() == "true"

    # The reloader would start a second sweep scheduler in the child process
    app.run(host=host, port=port, debug=debug, use_reloader=False)


if __name__ == "__main__":
    run()
