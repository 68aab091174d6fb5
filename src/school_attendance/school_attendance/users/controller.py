from __future__ import annotations

import logging

from flask import Flask, g, jsonify

from ..access.decorators import login_required
from ..access.identity import end_session, start_session
from ..common.http import json_api, json_body
from ..container import Container
from ..core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    # Registration

    @app.route("/api/register/student", methods=["POST"], endpoint="register_student")
    @json_api("Failed to register student")
    def register_student():
        user_id = container.user_service.register_student(json_body())
        return jsonify({"message": "Student registered successfully", "id": user_id}), 201

    @app.route("/api/register/teacher", methods=["POST"], endpoint="register_teacher")
    @json_api("Failed to register teacher")
    def register_teacher():
        user_id = container.user_service.register_teacher(json_body())
        return jsonify({"message": "Teacher registered successfully", "id": user_id}), 201

    # Session

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    @json_api("Failed to log in")
    def login():
        data = json_body()
        email = str(data.get("email") or "")
        try:
            identity = container.auth_service.authenticate(email, str(data.get("password") or ""), data.get("role"))
        except AuthenticationError:
            logger.warning("Rejected login for %s", email)
            raise

        start_session(identity, remember=bool(data.get("remember")))
        logger.info("User %s logged in as %s", identity.user_id, identity.role.value)
        return jsonify({"user": identity.to_dict()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    @json_api("Failed to log out")
    def logout():
        end_session()
        return jsonify({"success": True})

    @app.route("/api/auth/session", methods=["GET"], endpoint="session_info")
    @json_api("Failed to read session")
    @login_required
    def session_info():
        return jsonify({"user": g.identity.to_dict()})

    # Accounts

    @app.route("/api/users/<int:user_id>", methods=["GET"], endpoint="get_user")
    @json_api("Failed to fetch user")
    @login_required
    def get_user(user_id: int):
        user = container.user_service.get_user(g.identity, user_id)
        return jsonify(user.to_public_dict())

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="delete_user")
    @json_api("Failed to delete user")
    @login_required
    def delete_user(user_id: int):
        self_deleted = container.user_service.delete_user(g.identity, user_id)
        if self_deleted:
            end_session()
        return jsonify({"message": "User deleted successfully", "selfDeleted": self_deleted})
