"""ASGI entrypoint for the face score API."""

from face_score.api.app import create_app
from face_score.containers import build_container

app = create_app(build_container())
