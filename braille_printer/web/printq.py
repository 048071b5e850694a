from __future__ import annotations

"""
Print queue endpoints for Braille Printer.

Endpoints:
- POST /printq/add  : Submit text (form or query: input, lang). Empty 200 on success.
- GET  /printq/list : List queue entries (type=label|paper|all, key). JSON array of {qid, type}.
- GET  /printq/item : Fetch one entry (qid, format=text|svg|png, key).

Errors are plain-text bodies: 400 (bad parameters), 401 (no credential),
405 (wrong method), 500 (store failure, including an unknown qid).
"""

import json

from flask import Blueprint, Response, current_app, request
from pydantic import ValidationError
from werkzeug.exceptions import MethodNotAllowed

from braille_printer.core.auth import Unauthorized, resolve_credential
from braille_printer.core.db import StoreError
from braille_printer.printing.braille import UnsupportedLanguage
from braille_printer.printing.printq import PrintQueue
from braille_printer.printing.render import render_png
from . import schemas

printq_bp = Blueprint("printq", __name__, url_prefix="/printq")

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def _queue() -> PrintQueue:
    return current_app.extensions["printq"]


def _text_error(msg: str, code: int) -> Response:
    return Response(msg + "\n", status=code, content_type="text/plain; charset=utf-8")


def _json_response(payload) -> Response:
    return Response(json.dumps(payload, ensure_ascii=False), status=200, content_type=JSON_CONTENT_TYPE)


@printq_bp.app_errorhandler(MethodNotAllowed)
def _method_not_allowed(e: MethodNotAllowed):
    resp = _text_error("Method Not Allowed", 405)
    if e.valid_methods:
        resp.headers["Allow"] = ", ".join(e.valid_methods)
    return resp


@printq_bp.errorhandler(Unauthorized)
def _unauthorized(e: Unauthorized):
    current_app.logger.info("Rejected %s %s: %s", request.method, request.path, e)
    return _text_error("Unauthorized", 401)


@printq_bp.errorhandler(StoreError)
def _store_error(e: StoreError):
    current_app.logger.error("Store failure on %s: %s", request.path, e)
    return _text_error(str(e), 500)


@printq_bp.errorhandler(ValidationError)
def _invalid(e: ValidationError):
    return _text_error(schemas.first_error_message(e), 400)


@printq_bp.post("/add", provide_automatic_options=False)
def add():
    """
    Encode and store one submission for the caller's credential.
    """
    queue = _queue()
    credential = resolve_credential(request.headers, queue.settings)
    req = schemas.AddRequest.model_validate(request.values.to_dict())

    try:
        queue.submit(credential, req.input, req.lang)
    except UnsupportedLanguage as e:
        return _text_error(str(e), 400)
    return Response(status=200)


@printq_bp.get("/list", provide_automatic_options=False)
def list_entries():
    """
    Return [{qid, type}, ...] for the key, oldest first.
    """
    queue = _queue()
    q = schemas.ListQuery.model_validate(request.args.to_dict(), context={"settings": queue.settings})
    records = queue.list_records(q.key, q.type)
    entries = [schemas.QueueEntry(qid=r.qid, type=r.category).model_dump() for r in records]
    current_app.logger.info("GET /printq/list type=%s count=%d", q.type, len(entries))
    return _json_response(entries)


@printq_bp.get("/item", provide_automatic_options=False)
def item():
    """
    Return one record as text JSON, the stored SVG, or a PNG preview.
    """
    queue = _queue()
    args = request.args.to_dict()
    if not args.get("qid"):
        return _text_error("Bad Request", 400)
    q = schemas.ItemQuery.model_validate(args, context={"settings": queue.settings})

    record = queue.fetch(q.qid, q.key)
    current_app.logger.info("GET /printq/item qid=%s format=%s", q.qid, q.format)
    if q.format == "svg":
        return Response(record.rendered_image, status=200, content_type="image/svg+xml")
    if q.format == "png":
        return Response(render_png(record.encoded_text), status=200, content_type="image/png")
    return _json_response(schemas.ItemText(origin=record.original_text, result=record.encoded_text).model_dump())
