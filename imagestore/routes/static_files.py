import os
from urllib.parse import quote

from flask import Blueprint, abort, current_app, redirect, request, send_file, send_from_directory
from markupsafe import escape
from werkzeug.security import safe_join

static_bp = Blueprint("static_files", __name__)


@static_bp.get("/", defaults={"filename": ""})
@static_bp.get("/<path:filename>")
def serve_file(filename: str):
    """
    Serve whatever sits under STATIC_ROOT at the requested path.

    Paths that would leave the root, through ``..`` segments or through a
    symlink pointing elsewhere, are answered with 404 like any missing file.
    Directories get their index file, a listing when enabled, or 404.
    """
    root = current_app.config["STATIC_ROOT"]
    target = resolve_under_root(root, filename)
    if target is None:
        abort(404)

    if os.path.isdir(target):
        if not request.path.endswith("/"):
            location = request.path + "/"
            if request.query_string:
                location += "?" + request.query_string.decode("latin-1")
            return redirect(location, code=301)
        index_path = resolve_under_root(root, os.path.join(filename, current_app.config["STATIC_INDEX_FILE"]))
        if index_path and os.path.isfile(index_path):
            return send_file(index_path)
        if current_app.config["STATIC_DIRECTORY_LISTING"]:
            return _render_listing(target)
        abort(404)

    if not os.path.isfile(target):
        abort(404)
    return send_from_directory(root, filename)


def resolve_under_root(root: str, filename: str) -> str | None:
    """Return the real path for ``filename`` inside ``root``, or None if it escapes or can't be read."""
    joined = safe_join(root, filename) if filename else root
    if joined is None:
        return None
    try:
        real_root = os.path.realpath(root)
        real_target = os.path.realpath(joined)
        if os.path.commonpath([real_root, real_target]) != real_root:
            return None
        if not os.path.exists(real_target) or not os.access(real_target, os.R_OK):
            return None
    except (ValueError, OSError):
        # NUL bytes and other names the filesystem rejects
        return None
    return real_target


def _render_listing(directory: str):
    lines = ["<pre>"]
    for entry in sorted(os.scandir(directory), key=lambda e: e.name):
        name = entry.name + "/" if entry.is_dir() else entry.name
        lines.append(f'<a href="{quote(name)}">{escape(name)}</a>')
    lines.append("</pre>")
    body = "\n".join(lines) + "\n"
    return body, 200, {"Content-Type": "text/html; charset=utf-8"}
