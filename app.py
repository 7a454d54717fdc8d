# app.py
"""
Dev entry point for the task manager API (file-backed).

Run with ``python app.py``; storage location, secret and port come from
the environment or a local .env (see taskboard/config.py).

NOT FOR PRODUCTION as is: set JWT_SECRET, APP_ENV=production and put a
real WSGI server in front of create_app().
"""
from taskboard import Settings, create_app
from taskboard.logging_setup import setup_logging

settings = Settings.from_env()
setup_logging(settings.log_level)
app = create_app(settings)

if __name__ == "__main__":
    # debug only while developing
    app.run(host=settings.host, port=settings.port, debug=settings.is_development)
