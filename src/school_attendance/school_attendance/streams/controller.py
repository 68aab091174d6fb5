from __future__ import annotations

from flask import Flask, g, jsonify

from ..access.decorators import student_required, teacher_required
from ..common.http import json_api, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    # Teacher side

    @app.route("/api/teacher/streams", methods=["GET"], endpoint="teacher_streams")
    @json_api("Failed to fetch streams")
    @teacher_required
    def teacher_streams():
        return jsonify(list(container.stream_service.list_for_teacher(g.identity)))

    @app.route("/api/teacher/streams", methods=["POST"], endpoint="create_stream")
    @json_api("Failed to create stream")
    @teacher_required
    def create_stream():
        return jsonify(container.stream_service.create(g.identity, json_body())), 201

    @app.route("/api/teacher/streams/<int:stream_id>", methods=["GET"], endpoint="teacher_stream")
    @json_api("Failed to fetch stream")
    @teacher_required
    def teacher_stream(stream_id: int):
        return jsonify(container.stream_service.get_detail(g.identity, stream_id))

    @app.route("/api/teacher/streams/<int:stream_id>", methods=["PUT"], endpoint="update_stream")
    @json_api("Failed to update stream")
    @teacher_required
    def update_stream(stream_id: int):
        return jsonify(container.stream_service.update(g.identity, stream_id, json_body()))

    @app.route("/api/teacher/streams/<int:stream_id>", methods=["DELETE"], endpoint="delete_stream")
    @json_api("Failed to delete stream")
    @teacher_required
    def delete_stream(stream_id: int):
        container.stream_service.delete(g.identity, stream_id)
        return jsonify({"success": True})

    # Student side

    @app.route("/api/student/streams", methods=["GET"], endpoint="student_streams")
    @json_api("Failed to fetch streams")
    @student_required
    def student_streams():
        return jsonify(list(container.student_stream_service.list_for_student(g.identity)))

    @app.route("/api/student/streams/<int:stream_id>", methods=["GET"], endpoint="student_stream")
    @json_api("Failed to fetch stream")
    @student_required
    def student_stream(stream_id: int):
        return jsonify(container.student_stream_service.get_for_student(g.identity, stream_id))

    @app.route("/api/student/streams/<int:stream_id>/subjects", methods=["GET"], endpoint="student_stream_subjects")
    @json_api("Failed to fetch subjects")
    @student_required
    def student_stream_subjects(stream_id: int):
        return jsonify(list(container.student_stream_service.subjects_for_student(g.identity, stream_id)))
