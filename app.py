"""
Sheet Mapper: HTTP API for reading people from uploaded workbooks.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from flask import Flask, request
from werkzeug.utils import secure_filename

from sheet_mapper.config import ReaderConfig
from sheet_mapper.document import DocumentOpenError
from sheet_mapper.mappers import PersonRowMapper
from sheet_mapper.reader import TabularReader

# -------------------------------------------------------
# App Setup
# -------------------------------------------------------

app = Flask(__name__)

app.config["MAX_CONTENT_LENGTH"] = 16 * 1024 * 1024

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {"xlsx", "xls"}

reader = TabularReader(ReaderConfig(log_level=logging.WARNING))

# -------------------------------------------------------
# Helpers
# -------------------------------------------------------

def allowed_file(filename: str) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS


def error(message: str, status: int) -> Tuple[Dict[str, Any], int]:
    return {"success": False, "error": message}, status


def uploaded_file() -> Tuple[Optional[Any], Optional[Tuple[Dict[str, Any], int]]]:
    """Return the uploaded file, or an error response."""
    if "file" not in request.files:
        return None, error("No file uploaded", 400)

    file = request.files["file"]

    if file.filename == "":
        return None, error("No file selected", 400)

    if not allowed_file(file.filename):
        return None, error(
            f"Invalid file type. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}",
            400,
        )

    return file, None


def int_field(name: str, default: int) -> int:
    raw = request.form.get(name, "").strip()
    if not raw:
        return default
    value = int(raw)
    if value < 0:
        raise ValueError(f"{name} must be >= 0")
    return value


# -------------------------------------------------------
# API
# -------------------------------------------------------

@app.route("/api/read", methods=["POST"])
def api_read():
    file, failure = uploaded_file()
    if failure:
        return failure

    try:
        header_rows = int_field("header_rows", reader.config.header_row_count)
        sheet_index = int_field("sheet_index", reader.config.sheet_index)
    except ValueError as e:
        return error(f"Invalid parameter: {e}", 400)

    filename = secure_filename(file.filename)

    try:
        people = reader.read_all(
            file.stream,
            PersonRowMapper(),
            header_row_count=header_rows,
            sheet_index=sheet_index,
        )
    except DocumentOpenError as e:
        logger.warning("Cannot open upload %s: %s", filename, e)
        return error(str(e), 400)
    except IndexError as e:
        return error(str(e), 404)

    return {
        "success": True,
        "filename": filename,
        "sheet_index": sheet_index,
        "count": len(people),
        "records": [p.to_dict() for p in people],
    }, 200


@app.route("/api/sheets", methods=["POST"])
def api_sheets():
    file, failure = uploaded_file()
    if failure:
        return failure

    filename = secure_filename(file.filename)

    try:
        names = reader.sheet_names(file.stream)
    except DocumentOpenError as e:
        logger.warning("Cannot open upload %s: %s", filename, e)
        return error(str(e), 400)

    return {
        "success": True,
        "filename": filename,
        "count": len(names),
        "sheets": names,
    }, 200


@app.route("/")
def home():
    return {
        "status": "sheet-mapper server running",
        "message": "Use /api/health to check server status",
        "endpoints": ["/api/read", "/api/sheets", "/api/health"],
    }


@app.route("/api/health", methods=["GET"])
def api_health():
    return {
        "status": "online",
        "version": "1.0.0",
        "api": ["/api/read", "/api/sheets"],
        "methods": ["POST"],
    }, 200


# -------------------------------------------------------
# Main
# -------------------------------------------------------

if __name__ == "__main__":
    print("=" * 60)
    print("Sheet Mapper Server Running")
    print("http://localhost:5000")
    print("=" * 60)

    app.run(host="0.0.0.0", port=5000, debug=True)
