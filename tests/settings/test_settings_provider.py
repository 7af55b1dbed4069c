from __future__ import annotations

import logging

from classroom_attendance.settings.model import AcademicTerm
from classroom_attendance.settings.service import SettingsProvider
from tests.fakes import InMemorySettings

DEFAULT_TERM = AcademicTerm("2024-2025", "First Semester")


def _provider(**values):
    return SettingsProvider(
        InMemorySettings(values),
        default_term=DEFAULT_TERM,
        early_arrival_minutes=15,
        late_threshold_minutes=10,
    )


def test_defaults_without_stored_values():
    current = _provider().current()
    assert current.term == DEFAULT_TERM
    assert (current.early_arrival_minutes, current.late_threshold_minutes) == (15, 10)


def test_defaults_without_repository():
    assert SettingsProvider().current().early_arrival_minutes == 15


def test_stored_values_win():
    current = _provider(
        current_academic_year="2025-2026",
        current_semester="Second Semester",
        student_early_arrival_window="20",
        late_tolerance_minutes="5",
    ).current()

    assert current.term == AcademicTerm("2025-2026", "Second Semester")
    assert (current.early_arrival_minutes, current.late_threshold_minutes) == (20, 5)


def test_bad_values_fall_back(caplog):
    with caplog.at_level(logging.WARNING):
        current = _provider(student_early_arrival_window="soon", late_tolerance_minutes="-3").current()

    assert (current.early_arrival_minutes, current.late_threshold_minutes) == (15, 10)
    assert "non-numeric" in caplog.text
    assert "negative" in caplog.text


def test_blank_term_values_fall_back():
    assert _provider(current_academic_year="", current_semester="").current().term == DEFAULT_TERM


def test_settings_are_read_on_every_call():
    repo = InMemorySettings()
    provider = SettingsProvider(repo, default_term=DEFAULT_TERM)
    assert provider.current().late_threshold_minutes == 15

    repo.values["late_tolerance_minutes"] = "0"
    assert provider.current().late_threshold_minutes == 0
