"""ASGI entrypoint: ``uvicorn cv_architect.main:app``."""

from cv_architect.core.app_factory import create_app

app = create_app()
