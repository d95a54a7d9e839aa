"""ASGI entrypoint for the exam prep API."""

from exam_prep.api.app import create_app
from exam_prep.containers import build_container

app = create_app(build_container())
