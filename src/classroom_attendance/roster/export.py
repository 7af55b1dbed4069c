from __future__ import annotations

import io

import pandas as pd

from .model import Roster

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _hhmm(value) -> str:
    return value.strftime("%H:%M") if value else ""


def roster_frame(roster: Roster) -> pd.DataFrame:
    rows = list(roster.rows)
    if roster.instructor:
        rows = [roster.instructor] + rows
    data = [
        {
            "User ID": r.user_id,
            "Name": r.full_name,
            "Role": r.role.value,
            "Status": r.status.value,
            "Sign In": _hhmm(r.sign_in),
            "Sign Out": _hhmm(r.sign_out),
        }
        for r in rows
    ]
    return pd.DataFrame(data, columns=["User ID", "Name", "Role", "Status", "Sign In", "Sign Out"])


def roster_workbook(roster: Roster) -> io.BytesIO:
    """Roster as an in-memory .xlsx, ready for ``send_file``."""

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        roster_frame(roster).to_excel(writer, index=False, sheet_name="Roster")
    output.seek(0)
    return output


def export_filename(roster: Roster) -> str:
    s = roster.schedule
    return f"roster_{s.subject_code}_{s.room_number}_{roster.session_date.isoformat()}.xlsx"
