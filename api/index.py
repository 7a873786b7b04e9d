"""
Serverless entry point for the Agri AI backend.

The platform imports ``app`` from this module. If ``agri_ai.main`` fails to
import (missing dependency, bad env), every request gets a JSON 500 in the
same ``{success, error}`` shape as the API, plus the traceback for debugging.
"""
import json
import sys
import traceback

try:
    from agri_ai.main import app
except Exception as import_error:
    boot_failure = {
        "success": False,
        "error": f"Agri AI backend failed to start: {import_error}",
        "type": type(import_error).__name__,
        "traceback": traceback.format_exc(),
        "python_version": sys.version,
    }

    async def app(scope, receive, send):
        if scope["type"] != "http":
            return
        body = json.dumps(boot_failure, ensure_ascii=False).encode("utf-8")
        await send({
            "type": "http.response.start",
            "status": 500,
            "headers": [[b"content-type", b"application/json; charset=utf-8"]],
        })
        await send({"type": "http.response.body", "body": body})
