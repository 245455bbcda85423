"""
API Models for Swagger documentation
"""

from flask_restx import fields

from keydrop.api.v1 import api

file_info = api.model(
    "FileInfo",
    {
        "filename": fields.String(description="Name the file was uploaded with", example="report.pdf"),
        "publicKey": fields.String(
            description="Download key, share it with recipients",
            example="3f9a1c0b7d2e4a68",
        ),
        "privateKey": fields.String(
            description="Delete key, keep it secret",
            example="b41e09c27f6d3a85",
        ),
    },
)

single_upload_response = api.model(
    "SingleUploadResponse",
    {
        "message": fields.String(example="File uploaded successfully!"),
        "file": fields.Nested(file_info),
    },
)

multi_upload_response = api.model(
    "MultiUploadResponse",
    {
        "message": fields.String(example="Files uploaded successfully!"),
        "files": fields.List(fields.Nested(file_info)),
    },
)

message_response = api.model(
    "MessageResponse",
    {
        "message": fields.String(description="Human-readable outcome"),
    },
)
