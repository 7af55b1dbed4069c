from __future__ import annotations

from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import parse_clock_time, parse_iso_date
from ..common.http import iso
from ..common.validators import require_non_empty
from ..container import Container
from .export import XLSX_MIMETYPE, export_filename, roster_workbook
from .model import Roster, RosterRow


def _row(r: RosterRow) -> dict:
    return {
        "user_id": r.user_id,
        "name": r.full_name,
        "role": r.role.value,
        "status": r.status.value,
        "sign_in": iso(r.sign_in),
        "sign_out": iso(r.sign_out),
    }


def _roster_json(roster: Roster) -> dict:
    s = roster.schedule
    return {
        "success": True,
        "schedule": {
            "schedule_id": s.schedule_id,
            "subject_code": s.subject_code,
            "subject_name": s.subject_name,
            "room": s.room_number,
            "day_of_week": s.day_of_week,
            "start_time": s.start_time.strftime("%H:%M"),
            "end_time": s.end_time.strftime("%H:%M"),
        },
        "date": roster.session_date.isoformat(),
        "session": (
            {
                "session_id": roster.session.session_id,
                "status": roster.session.status.value,
                "started_at": iso(roster.session.started_at),
                "ended_at": iso(roster.session.ended_at),
            }
            if roster.session
            else None
        ),
        "instructor": _row(roster.instructor) if roster.instructor else None,
        "students": [_row(r) for r in roster.rows],
        "stats": {
            "present": roster.stats.present,
            "late": roster.stats.late,
            "absent": roster.stats.absent,
            "total": roster.stats.total,
        },
    }


def register(app: Flask, container: Container) -> None:
    service = container.roster_service

    def _from_query() -> Roster:
        key = request.args.get("session_key")
        if key:
            return service.for_session_key(key)
        return service.for_slot(
            on_date=parse_iso_date(request.args.get("date") or ""),
            room_number=require_non_empty(request.args.get("room"), "room"),
            start_time=parse_clock_time(request.args.get("start") or ""),
        )

    @app.route("/api/roster", methods=["GET"], endpoint="roster")
    def roster():
        return jsonify(_roster_json(_from_query()))

    @app.route("/api/roster/export", methods=["GET"], endpoint="roster_export")
    def roster_export():
        r = _from_query()
        return send_file(
            roster_workbook(r),
            download_name=export_filename(r),
            as_attachment=True,
            mimetype=XLSX_MIMETYPE,
        )

    @app.route("/api/roster/<path:session_key>", methods=["GET"], endpoint="roster_by_key")
    def roster_by_key(session_key: str):
        return jsonify(_roster_json(service.for_session_key(session_key)))
