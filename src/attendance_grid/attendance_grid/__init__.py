"""Attendance Grid package.

Feature modules (calendar, attendance, projects, payroll) hold pure state
transforms and services; the REST backend is reached through ``api`` and the
Flask controllers stay thin.
"""
