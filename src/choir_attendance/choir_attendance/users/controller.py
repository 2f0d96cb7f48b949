from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..common.http import admin_required, current_role, fail, json_body, json_errors, login_required, ok
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthenticationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    @json_errors
    def login():
        payload = json_body(form_fallback=True)
        email = payload.get("email", "")
        password = payload.get("password", "")

        try:
            s_user = container.auth_service.authenticate(email, password)
        except AuthenticationError as e:
            return fail(str(e), 401)

        session.clear()
        session.permanent = bool(payload.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=7)

        session["user_id"] = s_user.user_id
        session["email"] = s_user.email
        session["role"] = s_user.role.value
        session["member_id"] = s_user.member_id

        return ok(user={"user_id": s_user.user_id, "email": s_user.email, "role": s_user.role.value, "member_id": s_user.member_id})

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Logged out")

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return ok(
            user={
                "user_id": session.get("user_id"),
                "email": session.get("email"),
                "role": session.get("role"),
                "member_id": session.get("member_id"),
            }
        )

    @app.route("/api/users", methods=["POST"], endpoint="create_user")
    @admin_required
    @json_errors
    def create_user():
        payload = json_body()
        role = Role(payload.get("role") or Role.MEMBER.value)
        user_id = container.user_service.create_account(
            current_role=current_role(),
            email=payload.get("email", ""),
            password=payload.get("password", ""),
            role=role,
            member_id=payload.get("member_id") or None,
        )
        return ok(user_id=user_id), 201
