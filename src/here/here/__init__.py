"""Here: school attendance and scheduling service.

This package is organized by feature modules (school_calendar, sections,
schedules, attendance, teachers, users) with a thin Flask controller layer
over service/repository layers.
"""
