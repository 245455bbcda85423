"""
API Namespaces - Organized endpoint groups
"""

from flask import current_app, request, send_file
from flask_restx import Namespace, Resource

from keydrop.api.rate_limit_decorator import rate_limit
from keydrop.api.v1.models import message_response, multi_upload_response, single_upload_response
from keydrop.application.upload_service import UploadService, build_file_info
from keydrop.domain.errors import (
    ERROR_MESSAGES,
    ErrorCategory,
    StoredFileNotFoundError,
    create_error_response,
    error_response_from,
)
from keydrop.domain.file_storage import FileLifecycleManager
from keydrop.domain.file_storage.value_objects import redact

UPLOAD_FIELD = "files"

# =============================================================================
# Files Namespace - upload, download and delete
# =============================================================================

files_ns = Namespace("files", description="Anonymous file drop operations")


def _resolve(service_type):
    return current_app.container.resolve(service_type)


@files_ns.route("")
class FileUpload(Resource):
    """Upload one or more files"""

    @files_ns.doc("upload_files", params={UPLOAD_FIELD: {"in": "formData", "type": "file", "description": "One or more files"}})
    @files_ns.response(200, "Uploaded", single_upload_response)
    @files_ns.response(400, "No files uploaded", message_response)
    @files_ns.response(429, "Too Many Requests", message_response)
    @files_ns.response(500, "Internal Server Error", message_response)
    @rate_limit("upload")
    def post(self):
        """
        Upload files

        Send a multipart form with one or more parts named ``files``. Each
        stored file gets its own public key (download) and private key (delete).
        A single file is returned under ``file``, several under ``files``.
        """
        uploads = request.files.getlist(UPLOAD_FIELD)

        try:
            stored = _resolve(UploadService).store_uploads(uploads)
        except Exception as e:
            current_app.logger.exception(f"Upload failed: {e}")
            return error_response_from(e)

        file_info = build_file_info(stored)
        if not file_info:
            return create_error_response(ERROR_MESSAGES[ErrorCategory.NO_FILES_UPLOADED], 400)

        if len(file_info) == 1:
            return {"message": "File uploaded successfully!", "file": file_info[0]}, 200

        return {"message": "Files uploaded successfully!", "files": file_info}, 200


@files_ns.route("/<string:key>")
@files_ns.param("key", "Public key to download, private key to delete")
class StoredFileResource(Resource):
    """Download or delete a stored file by key"""

    @files_ns.doc("download_file")
    @files_ns.produces(["application/octet-stream"])
    @files_ns.response(200, "File content")
    @files_ns.response(404, "File Not Found", message_response)
    @files_ns.response(429, "Too Many Requests", message_response)
    @files_ns.response(500, "Internal Server Error", message_response)
    @rate_limit("download")
    def get(self, key):
        """
        Download a file by its public key

        The response is an attachment named after the original upload. The
        body is streamed by the WSGI server, which drops a connection the
        client closes mid-transfer; closing the response closes the file.
        """
        lifecycle_manager = _resolve(FileLifecycleManager)

        try:
            stored_file, stream = lifecycle_manager.open_file_by_public_key(key)
        except StoredFileNotFoundError as e:
            current_app.logger.info(f"Download miss for key {redact(key)}")
            return error_response_from(e)
        except Exception as e:
            current_app.logger.error(f"Download failed for key {redact(key)}: {e}")
            return error_response_from(e)

        try:
            response = send_file(
                stream,
                as_attachment=True,
                download_name=stored_file.original_name,
                max_age=0,
            )
        except Exception as e:
            stream.close()
            current_app.logger.error(f"Could not send file for key {redact(key)}: {e}")
            return create_error_response(ERROR_MESSAGES[ErrorCategory.DOWNLOAD_FAILED], 500)

        current_app.logger.info(f"Serving file for key {redact(key)}")
        return response

    @files_ns.doc("delete_file")
    @files_ns.response(200, "Deleted", message_response)
    @files_ns.response(404, "File Not Found", message_response)
    @files_ns.response(500, "Internal Server Error", message_response)
    def delete(self, key):
        """
        Delete a file by its private key
        """
        try:
            _resolve(FileLifecycleManager).delete_file_by_private_key(key)
        except Exception as e:
            current_app.logger.info(f"Delete failed for key {redact(key)}: {e}")
            return error_response_from(e)

        return {"message": "File deleted successfully"}, 200
