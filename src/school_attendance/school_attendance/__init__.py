"""School attendance API package.

Organized by feature modules (users, streams, subjects, enrollments,
attendance, dashboard) with a thin Flask controller layer over
service/repository layers.
"""
