"""
API v1 - Keydrop REST API

Upload, download and delete endpoints with OpenAPI/Swagger documentation.
"""

import os

from flask import Blueprint
from flask_restx import Api

API_PREFIX = os.getenv("API_PREFIX", "/api")

api_v1_bp = Blueprint("api_v1", __name__, url_prefix=API_PREFIX)

api = Api(
    api_v1_bp,
    version="1.0",
    title="Keydrop API",
    description="Anonymous file drop: upload a file, share its public key, delete it with its private key",
    doc="/docs",
)

# Import namespaces after api is created to avoid circular imports
from .namespaces import files_ns  # noqa: E402

api.add_namespace(files_ns, path="/files")
