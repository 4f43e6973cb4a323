import logging

from firebase_admin import auth
from flask import Flask, request, jsonify, g
from werkzeug.exceptions import HTTPException

import config
import ledger_service
from errors import AuthenticationError, LedgerError

logger = logging.getLogger(__name__)


def safe_res(status, msg, data=None, code=200):
    if data is None: data = {}
    return jsonify({"status": status, "message": msg, "data": data}), code


def create_app(repo=None):
    if repo is None:
        from firebase_repository import FirebaseRepository
        config.init_firebase()
        repo = FirebaseRepository()

    app = Flask(__name__)

    @app.errorhandler(LedgerError)
    def handle_ledger_error(e):
        return safe_res("error", e.message, code=e.status_code)

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            return safe_res("error", e.description, code=e.code)
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return safe_res("error", "Internal error", code=500)

    def current_user():
        """Resolve the Firebase ID token in the Authorization header to a stored user."""
        if "user" in g:
            return g.user
        header = request.headers.get("Authorization", "")
        if not header.startswith("Bearer "):
            raise AuthenticationError("Authentication required")
        try:
            claims = auth.verify_id_token(header[len("Bearer "):])
        except (ValueError, auth.InvalidIdTokenError, auth.ExpiredIdTokenError) as e:
            raise AuthenticationError("Invalid token") from e
        g.user = repo.get_user(claims["uid"])
        if not g.user:
            raise AuthenticationError("User not found")
        return g.user

    def body():
        return request.get_json(force=True, silent=True) or {}

    @app.route("/", methods=["GET"])
    def check():
        return safe_res("success", "API running OK")

    # ================================
    # 📊 DASHBOARD SECTION
    # ================================

    @app.route("/v1/dashboard/balances", methods=["GET"])
    def user_balances():
        return safe_res("success", "Fetched", ledger_service.get_user_balances(repo, current_user()))

    @app.route("/v1/dashboard/totalSpent", methods=["GET"])
    def total_spent():
        total = ledger_service.get_total_spent(repo, current_user())
        return safe_res("success", "Fetched", {"totalSpent": total})

    @app.route("/v1/dashboard/monthlySpending", methods=["GET"])
    def monthly_spending():
        months = ledger_service.get_monthly_spending(repo, current_user())
        return safe_res("success", "Fetched", {"monthlySpending": months})

    @app.route("/v1/dashboard/groups", methods=["GET"])
    def user_groups():
        groups = ledger_service.get_user_groups(repo, current_user())
        return safe_res("success", "Fetched", {"groups": groups})

    # ================================
    # 👥 GROUPS SECTION
    # ================================

    @app.route("/v1/groups/getGroupExpenses", methods=["POST"])
    def group_expenses():
        gid = body().get("groupId")
        data = ledger_service.get_group_expenses(repo, current_user(), gid)
        return safe_res("success", "Fetched", data)

    @app.route("/v1/groups/getGroupsOrMembers", methods=["POST"])
    def groups_or_members():
        gid = body().get("groupId")
        data = ledger_service.get_groups_or_members(repo, current_user(), gid)
        return safe_res("success", "Fetched", data)

    @app.route("/v1/groups", methods=["DELETE"])
    def delete_group():
        gid = body().get("groupId")
        data = ledger_service.delete_group(repo, current_user(), gid)
        return safe_res("success", "Group deleted", data)

    return app


if __name__ == "__main__":
    config.configure_logging()
    create_app().run(host="0.0.0.0", port=config.PORT, debug=config.DEBUG)
