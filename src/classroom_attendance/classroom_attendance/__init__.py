"""Classroom Attendance package.

This package is organized by feature modules (students, classes, attendance,
notifications) with a thin Flask controller layer on top of service and
repository layers.
"""
