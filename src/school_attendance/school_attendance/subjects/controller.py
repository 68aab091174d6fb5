from __future__ import annotations

from flask import Flask, g, jsonify

from ..access.decorators import student_required, teacher_required
from ..common.http import json_api, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.subject_service

    @app.route("/api/teacher/subjects", methods=["GET"], endpoint="teacher_subjects")
    @json_api("Failed to fetch subjects")
    @teacher_required
    def teacher_subjects():
        return jsonify(list(service.list_for_teacher(g.identity)))

    @app.route("/api/teacher/streams/<int:stream_id>/subjects", methods=["GET"], endpoint="stream_subjects")
    @json_api("Failed to fetch subjects")
    @teacher_required
    def stream_subjects(stream_id: int):
        return jsonify(list(service.list_for_stream(g.identity, stream_id)))

    @app.route("/api/teacher/streams/<int:stream_id>/subjects", methods=["POST"], endpoint="create_subject")
    @json_api("Failed to create subject")
    @teacher_required
    def create_subject(stream_id: int):
        return jsonify(service.create(g.identity, stream_id, json_body())), 201

    @app.route("/api/teacher/subjects/<int:subject_id>", methods=["GET"], endpoint="teacher_subject")
    @json_api("Failed to fetch subject")
    @teacher_required
    def teacher_subject(subject_id: int):
        return jsonify(service.get_detail(g.identity, subject_id))

    @app.route("/api/teacher/subjects/<int:subject_id>", methods=["PUT"], endpoint="update_subject")
    @json_api("Failed to update subject")
    @teacher_required
    def update_subject(subject_id: int):
        return jsonify(service.update(g.identity, subject_id, json_body()))

    @app.route("/api/teacher/subjects/<int:subject_id>", methods=["DELETE"], endpoint="delete_subject")
    @json_api("Failed to delete subject")
    @teacher_required
    def delete_subject(subject_id: int):
        service.delete(g.identity, subject_id)
        return jsonify({"success": True})

    @app.route("/api/student/subjects", methods=["GET"], endpoint="student_subjects")
    @json_api("Failed to fetch subjects")
    @student_required
    def student_subjects():
        return jsonify(list(service.list_for_student(g.identity)))

    @app.route("/api/student/subjects/<int:subject_id>", methods=["GET"], endpoint="student_subject")
    @json_api("Failed to fetch subject")
    @student_required
    def student_subject(subject_id: int):
        return jsonify(service.get_for_student(g.identity, subject_id))
