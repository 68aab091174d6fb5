from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..access.decorators import student_required, teacher_required
from ..common.http import json_api, json_body, period_args, query_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    # Student side

    @app.route("/api/student/attendance", methods=["GET"], endpoint="student_attendance")
    @json_api("Failed to fetch attendance records")
    @student_required
    def student_attendance():
        summary = container.student_attendance_service.overall(
            g.identity, limit=query_int("limit"), **period_args()
        )
        return jsonify(summary.to_dict())

    @app.route("/api/student/streams/<int:stream_id>/attendance", methods=["GET"], endpoint="student_stream_attendance")
    @json_api("Failed to fetch attendance records")
    @student_required
    def student_stream_attendance(stream_id: int):
        data = container.student_attendance_service.for_stream(
            g.identity, stream_id, limit=query_int("limit"), **period_args()
        )
        return jsonify(data)

    @app.route("/api/student/subjects/<int:subject_id>/attendance", methods=["GET"], endpoint="student_subject_attendance")
    @json_api("Failed to fetch attendance records")
    @student_required
    def student_subject_attendance(subject_id: int):
        summary = container.student_attendance_service.for_subject(g.identity, subject_id, limit=query_int("limit"))
        return jsonify(summary.to_dict())

    # Teacher side

    @app.route("/api/teacher/subjects/<int:subject_id>/attendance", methods=["GET"], endpoint="teacher_subject_attendance")
    @json_api("Failed to fetch attendance records")
    @teacher_required
    def teacher_subject_attendance(subject_id: int):
        data = container.teacher_attendance_service.list_for_subject(
            g.identity,
            subject_id,
            on_date=request.args.get("date") or None,
            page=query_int("page", minimum=1),
            page_size=query_int("pageSize", minimum=1, maximum=500),
            **period_args(),
        )
        return jsonify(data)

    @app.route("/api/teacher/subjects/<int:subject_id>/attendance", methods=["POST"], endpoint="mark_attendance")
    @json_api("Failed to mark attendance")
    @teacher_required
    def mark_attendance(subject_id: int):
        written = container.teacher_attendance_service.mark(g.identity, subject_id, json_body())
        return jsonify({"success": True, "count": written})
