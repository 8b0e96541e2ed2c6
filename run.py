from scratchcard import create_app
from scratchcard.realtime import socketio
import os

app = create_app()

if __name__ == "__main__":
    port = app.config["PORT"]
    socketio.run(
        app,
        host=os.getenv("HOST", "127.0.0.1"),
        port=port,
        debug=False,
        use_reloader=False,
        log_output=True,
        allow_unsafe_werkzeug=True,
    )

# Local setup:
# docker compose up -d            (postgres + minio + redis)
# alembic upgrade head
# python scripts/seed.py
# PORT=5050 python run.py
#
# Import worker (only when USE_IMPORT_QUEUE=1):
# rq worker -u $REDIS_URL default
