"""
API Blueprint - image upload to thank-you PDF

Flow for POST /:
- stage the multipart ``image`` field to a temp file
- reject transport errors (400), non-PNG declared types (400), missing temp files (500)
- render the PDF and return it as an attachment named generated.pdf
- rendering failures return an empty 500; details only go to the error log
"""
import io
import os
from typing import Optional

from flask import Blueprint, Response, current_app, request, send_file

from app.models import UploadError, UploadedImage
from app.services.pdf_service import OUTPUT_FILENAME, render_thank_you_pdf
from app.uploads import discard_upload, stage_upload

api_bp = Blueprint('api', __name__)


# ============ Helper Functions ============

def text_response(body: str, status: int) -> Response:
    return Response(body, status=status, mimetype="text/plain")


def log_error(message: str) -> None:
    """Send a message to the app's error log; never raises."""
    try:
        sink = current_app.extensions.get("error_log") or current_app.logger.error
        sink(message)
    except Exception:
        pass


def build_response(image: Optional[UploadedImage], upload_error: UploadError) -> Response:
    if image is None or upload_error != UploadError.OK:
        code = int(upload_error if upload_error != UploadError.OK else UploadError.NO_FILE)
        return text_response(f"File upload error: {code}", 400)

    extension = image.extension
    if not image.is_allowed:
        log_error(f"Unsupported image type: {extension}")
        return text_response("Unsupported image type", 400)

    if not image.tmp_path or not os.path.exists(image.tmp_path):
        log_error(f"Uploaded file not found: {image.tmp_path}")
        return text_response("Uploaded file not found", 500)

    pdf_bytes, failure = render_thank_you_pdf(image.tmp_path, extension)
    if failure is not None:
        log_error(f"Error generating PDF: {failure.message}")
        if failure.cause:
            log_error(f"Previous exception: {failure.cause}")
        return text_response("", 500)

    return send_file(
        io.BytesIO(pdf_bytes),
        as_attachment=True,
        download_name=OUTPUT_FILENAME,
        mimetype="application/pdf",
    )


# ============ API Routes ============

@api_bp.route("/", methods=["POST"], provide_automatic_options=False)
@api_bp.route("/generate", methods=["POST"], provide_automatic_options=False)
def generate_pdf():
    image, upload_error = stage_upload(request.files, "image", current_app.config.get("UPLOAD_FOLDER"))
    try:
        return build_response(image, upload_error)
    finally:
        discard_upload(image)


@api_bp.app_errorhandler(405)
def method_not_allowed(e):
    resp = text_response("Method Not Allowed", 405)
    resp.headers["Allow"] = ", ".join(sorted(getattr(e, "valid_methods", None) or ["POST"]))
    return resp


@api_bp.app_errorhandler(413)
def upload_too_large(e):
    return text_response(f"File upload error: {int(UploadError.INI_SIZE)}", 400)
