from __future__ import annotations

from flask import Flask, jsonify

from ..auth.guard import admin_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/cache/stats", methods=["GET"], endpoint="cache_stats")
    @admin_required
    def cache_stats():
        return jsonify(container.cache.stats())

    @app.route("/admin/cache", methods=["DELETE"], endpoint="clear_cache")
    @admin_required
    def clear_cache():
        container.cache.clear()
        return jsonify({"message": "Cache cleared"})
