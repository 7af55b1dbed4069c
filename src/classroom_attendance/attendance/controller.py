from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import as_int, field, iso
from ..common.validators import parse_auth_method, parse_location, parse_scan_type
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/scan", methods=["POST"], endpoint="submit_scan")
    def submit_scan():
        data = request.get_json(silent=True) or {}
        result = service.submit_scan(
            auth_method=parse_auth_method(field(data, "auth_method", "authMethod")),
            room_id=as_int(field(data, "room_id", "roomId"), "room_id"),
            identifier=field(data, "identifier"),
            fingerprint_id=as_int(field(data, "fingerprint_id", "fingerprintId"), "fingerprint_id", required=False),
            subject_id=as_int(field(data, "subject_id", "subjectId"), "subject_id", required=False),
            scan_type=parse_scan_type(field(data, "scan_type", "scanType")),
            location=parse_location(field(data, "location")),
        )
        subject = None
        if result.subject_code:
            subject = {"code": result.subject_code, "name": result.subject_name}
        return (
            jsonify(
                {
                    "success": True,
                    "message": "Attendance recorded successfully",
                    "attendance": {
                        "attendance_id": result.attendance_id,
                        "status": result.status.value,
                        "scan_type": result.scan_type.value,
                        "scan_time": iso(result.scan_time),
                        "room": result.room_number,
                        "subject": subject,
                        "session_id": result.session_id,
                        "user": {
                            "id": result.user_id,
                            "name": result.full_name,
                            "role": result.role.value,
                        },
                    },
                }
            ),
            201,
        )

    @app.route("/api/scan/early-arrival", methods=["POST"], endpoint="early_arrival_scan")
    def early_arrival_scan():
        data = request.get_json(silent=True) or {}
        result = service.early_arrival_scan(
            auth_method=parse_auth_method(field(data, "auth_method", "authMethod")),
            room_id=as_int(field(data, "room_id", "roomId"), "room_id"),
            identifier=field(data, "identifier"),
            fingerprint_id=as_int(field(data, "fingerprint_id", "fingerprintId"), "fingerprint_id", required=False),
        )
        return (
            jsonify(
                {
                    "success": True,
                    "message": f"Early arrival recorded for {result.subject_code}",
                    "attendance_id": result.attendance_id,
                    "status": result.status.value,
                    "scan_time": iso(result.scan_time),
                    "room": result.room_number,
                    "subject": {"code": result.subject_code, "name": result.subject_name},
                    "class_start": result.class_start.strftime("%H:%M"),
                    "class_end": result.class_end.strftime("%H:%M"),
                }
            ),
            201,
        )

    @app.route("/api/attendance/awaiting-stats", methods=["GET"], endpoint="awaiting_stats")
    def awaiting_stats():
        raw = request.args.get("date")
        stats = service.awaiting_stats(parse_iso_date(raw) if raw else None)
        return jsonify(
            {
                "success": True,
                "date": stats.on_date.isoformat(),
                "awaiting_records": stats.records,
                "schedules": stats.schedules,
                "students": stats.students,
            }
        )
