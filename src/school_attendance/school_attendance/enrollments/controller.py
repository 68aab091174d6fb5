from __future__ import annotations

from flask import Flask, g, jsonify

from ..access.decorators import teacher_required
from ..common.http import json_api, json_body, query_int
from ..container import Container


def _profiles(rows) -> list:
    return [p.to_dict() for p in rows]


def register(app: Flask, container: Container) -> None:
    service = container.enrollment_service

    # Streams

    @app.route("/api/teacher/streams/<int:stream_id>/students", methods=["GET"], endpoint="stream_students")
    @json_api("Failed to fetch students")
    @teacher_required
    def stream_students(stream_id: int):
        return jsonify(_profiles(service.students_in_stream(g.identity, stream_id)))

    @app.route("/api/teacher/streams/<int:stream_id>/students", methods=["POST"], endpoint="enroll_stream_student")
    @json_api("Failed to enroll student")
    @teacher_required
    def enroll_stream_student(stream_id: int):
        result = service.enroll_in_stream(g.identity, stream_id, json_body().get("studentId"))
        return jsonify({"success": True, "enrollmentIds": list(result.enrollment_ids)})

    @app.route(
        "/api/teacher/streams/<int:stream_id>/students/<int:student_id>",
        methods=["DELETE"],
        endpoint="unenroll_stream_student",
    )
    @json_api("Failed to unenroll student")
    @teacher_required
    def unenroll_stream_student(stream_id: int, student_id: int):
        removed = service.unenroll_from_stream(g.identity, stream_id, student_id)
        return jsonify({"success": True, "removed": removed})

    # Subjects

    @app.route("/api/teacher/subjects/<int:subject_id>/students", methods=["GET"], endpoint="subject_students")
    @json_api("Failed to fetch students")
    @teacher_required
    def subject_students(subject_id: int):
        return jsonify(_profiles(service.students_in_subject(g.identity, subject_id)))

    @app.route("/api/teacher/subjects/<int:subject_id>/students", methods=["POST"], endpoint="enroll_subject_student")
    @json_api("Failed to enroll student")
    @teacher_required
    def enroll_subject_student(subject_id: int):
        enrollment_id = service.enroll_in_subject(g.identity, subject_id, json_body().get("studentId"))
        return jsonify({"success": True, "enrollmentId": enrollment_id})

    @app.route(
        "/api/teacher/subjects/<int:subject_id>/students/<int:student_id>",
        methods=["DELETE"],
        endpoint="unenroll_subject_student",
    )
    @json_api("Failed to unenroll student")
    @teacher_required
    def unenroll_subject_student(subject_id: int, student_id: int):
        service.unenroll_from_subject(g.identity, subject_id, student_id)
        return jsonify({"success": True})

    # Student pickers

    @app.route("/api/teacher/students", methods=["GET"], endpoint="all_students")
    @json_api("Failed to fetch students")
    @teacher_required
    def all_students():
        return jsonify(_profiles(container.user_service.list_students()))

    @app.route("/api/teacher/students/available", methods=["GET"], endpoint="available_students")
    @json_api("Failed to fetch available students")
    @teacher_required
    def available_students():
        stream_id = query_int("streamId", minimum=1)
        return jsonify(_profiles(service.available_for_stream(g.identity, stream_id)))

    @app.route("/api/teacher/students/available-for-subject", methods=["GET"], endpoint="available_subject_students")
    @json_api("Failed to fetch available students")
    @teacher_required
    def available_subject_students():
        subject_id = query_int("subjectId", minimum=1)
        return jsonify(_profiles(service.available_for_subject(g.identity, subject_id)))
