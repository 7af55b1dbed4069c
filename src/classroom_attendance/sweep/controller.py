from __future__ import annotations

from flask import Flask, jsonify

from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/sweep", methods=["POST"], endpoint="run_sweep")
    def run_sweep():
        result = container.sweep_scheduler.run_once()
        if result is None:
            return jsonify({"success": False, "message": "Sweep skipped (already running or failed)"}), 409
        return jsonify(
            {
                "success": True,
                "date": result.on_date.isoformat(),
                "updated": result.updated,
                "schedule_ids": list(result.schedule_ids),
            }
        )
