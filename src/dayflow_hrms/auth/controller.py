from __future__ import annotations

from flask import Flask

from ..common.query_args import json_body
from ..common.responses import ok
from ..container import Container
from ..employees.serializers import account_to_json
from .decorators import build_guards, current_principal


def register(app: Flask, container: Container) -> None:
    guards = build_guards(container.auth_service)
    auth = container.auth_service

    @app.route("/auth/register", methods=["POST"], endpoint="auth_register")
    def register_account():
        body = json_body()
        auth.register(
            name=body.get("name"),
            email=body.get("email"),
            password=body.get("password"),
        )
        return ok("OTP sent to your email. Please verify.", 201)

    @app.route("/auth/verify-otp", methods=["PUT"], endpoint="auth_verify_otp")
    def verify_otp():
        body = json_body()
        token = auth.verify_otp(email=body.get("email"), otp=body.get("otp"))
        return ok("Email verified successfully", token=token)

    @app.route("/auth/login", methods=["POST"], endpoint="auth_login")
    def login():
        body = json_body()
        result = auth.login(email=body.get("email"), password=body.get("password"))
        return ok(token=result.token, user=account_to_json(result.account))

    @app.route("/auth/forgot-password", methods=["POST"], endpoint="auth_forgot_password")
    def forgot_password():
        body = json_body()
        auth.forgot_password(email=body.get("email"))
        return ok("Password reset link sent to your email")

    @app.route("/auth/reset-password/<token>", methods=["PUT"], endpoint="auth_reset_password")
    def reset_password(token: str):
        body = json_body()
        new_token = auth.reset_password(token=token, new_password=body.get("password"))
        return ok("Password reset successful", token=new_token)

    @app.route("/auth/me", methods=["GET"], endpoint="auth_me")
    @guards.login_required
    def me():
        return ok(user=account_to_json(auth.me(current_principal())))
