"""
Model registry for the licenses app.
"""
from licenses.infrastructure.models import GlobalRedemption  # noqa: F401
