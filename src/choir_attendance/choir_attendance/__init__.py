"""Choir Attendance package.

This package is organized by feature modules (members, attendance, scoring,
reports, ...) with a thin Flask controller layer and service/repository layers.
The scoring engine itself never touches Flask or the database.
"""
