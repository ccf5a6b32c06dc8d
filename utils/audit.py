import json
import logging

from flask import has_request_context, request

audit_logger = logging.getLogger("audit")


def log_event(action: str, entity=None, entity_id=None, metadata=None, level=logging.INFO):
    ip = None
    user_agent = None
    if has_request_context():
        ip = request.headers.get("X-Forwarded-For", request.remote_addr)
        user_agent = (request.headers.get("User-Agent") or "")[:255] or None

    audit_logger.log(
        level,
        "%s entity=%s entity_id=%s ip=%s ua=%s metadata=%s",
        action,
        entity,
        str(entity_id) if entity_id is not None else None,
        ip,
        user_agent,
        json.dumps(metadata, default=str) if metadata else None,
    )
