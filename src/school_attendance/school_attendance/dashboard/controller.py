from __future__ import annotations

from flask import Flask, g, jsonify

from ..access.decorators import student_required, teacher_required
from ..common.http import json_api, period_args
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/teacher/stats", methods=["GET"], endpoint="teacher_stats")
    @json_api("Failed to fetch stats")
    @teacher_required
    def teacher_stats():
        return jsonify(container.dashboard_service.teacher_stats(g.identity))

    @app.route("/api/teacher/activity", methods=["GET"], endpoint="teacher_activity")
    @json_api("Failed to fetch activity data")
    @teacher_required
    def teacher_activity():
        items = container.dashboard_service.teacher_activity(g.identity, **period_args())
        return jsonify([item.to_dict() for item in items])

    @app.route("/api/student/stats", methods=["GET"], endpoint="student_stats")
    @json_api("Failed to fetch stats")
    @student_required
    def student_stats():
        return jsonify(container.dashboard_service.student_stats(g.identity))
