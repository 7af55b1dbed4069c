"""Classroom attendance package.

Scan events from door/biometric devices are resolved to a class schedule,
classified into an attendance status and stored once per user, schedule and
day. Feature modules (schedules, attendance, roster, sweep, ...) follow the
model / repository / service / controller layering.
"""
