"""Flask REST API exposing the finance tracker."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from finance_core.exceptions import ParseError, RecordNotFoundError, ValidationError
from finance_core.gateway import EXPORT_FILENAME, PersistenceGateway
from finance_core.storage import JSONStorage
from finance_core.tracker import FinanceTracker, Outcome


def create_app(data_dir: Optional[Path] = None) -> Flask:
    app = Flask(__name__)

    env_name = os.getenv("FINANCE_TRACKER_ENV", "prod").lower()
    if env_name in {"dev", "development"}:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    else:
        allowed_origins = os.getenv("FINANCE_TRACKER_ALLOWED_ORIGINS")
        if allowed_origins:
            origins = [origin.strip() for origin in allowed_origins.split(",") if origin.strip()]
            CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)
        else:
            CORS(app)

    data_path = Path(data_dir or os.getenv("FINANCE_TRACKER_DATA_DIR", "data"))
    tracker = FinanceTracker(PersistenceGateway(JSONStorage(data_path)))
    app.extensions["finance_tracker"] = tracker
    if tracker.startup_notification is not None:
        app.logger.error("Saved state could not be loaded; starting empty")

    def _success(payload: Any, status: int = 200):
        return jsonify(payload), status

    def _from_outcome(outcome: Outcome, payload: Any, status: int = 200):
        if outcome.ok:
            body = {"data": payload}
            if outcome.notification is not None:
                body["notification"] = outcome.notification.to_dict()
            return _success(body, status)
        error = outcome.error
        if isinstance(error, RecordNotFoundError):
            code = 404
        elif isinstance(error, (ValidationError, ParseError)):
            code = 400
        else:
            code = 500
        app.logger.error("%s: %s", outcome.notification.message, error)
        return jsonify({
            "error": outcome.notification.message,
            "details": str(error),
        }), code

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    @app.get("/dashboard")
    def dashboard():
        return _success(tracker.dashboard())

    @app.get("/categories")
    def list_categories():
        return _success({"items": list(tracker.categories())})

    @app.get("/transactions")
    def list_transactions():
        transactions = tracker.list_transactions(
            request.args.get("type", ""), request.args.get("sort", "")
        )
        return _success({
            "items": [transaction.to_dict() for transaction in transactions],
            "count": len(transactions),
        })

    @app.post("/transactions")
    def create_transaction():
        payload = _json_body()
        outcome = tracker.add_transaction(
            payload.get("category"),
            payload.get("amount"),
            payload.get("type"),
            payload.get("date"),
            payload.get("description"),
        )
        data = outcome.value.to_dict() if outcome.ok else None
        return _from_outcome(outcome, data, 201)

    @app.get("/transactions/<transaction_id>")
    def get_transaction(transaction_id: str):
        transaction = tracker.find_transaction(transaction_id)
        if transaction is None:
            return _handle_error(
                RecordNotFoundError(transaction_id), 404, "Record not found"
            )
        return _success(transaction.to_dict())

    @app.put("/transactions/<transaction_id>")
    def update_transaction(transaction_id: str):
        payload = _json_body()
        outcome = tracker.edit_transaction(transaction_id, payload)
        data = outcome.value.to_dict() if outcome.ok else None
        return _from_outcome(outcome, data)

    @app.delete("/transactions/<transaction_id>")
    def delete_transaction(transaction_id: str):
        outcome = tracker.delete_transaction(transaction_id)
        return _from_outcome(outcome, {"deleted": bool(outcome.value)})

    @app.put("/budget")
    def set_budget():
        payload = _json_body()
        outcome = tracker.set_budget(payload.get("amount"))
        data = {"budget": float(outcome.value)} if outcome.ok else None
        return _from_outcome(outcome, data)

    @app.delete("/data")
    def clear_data():
        return _from_outcome(tracker.clear_all(), {})

    @app.get("/export")
    def export_data():
        return Response(
            tracker.export_data(),
            mimetype="application/json",
            headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
        )

    @app.post("/import")
    def import_data():
        outcome = tracker.import_data(request.get_data())
        data = {"transaction_count": len(outcome.value.transactions)} if outcome.ok else None
        return _from_outcome(outcome, data)

    @app.get("/report")
    def report():
        return _success(tracker.report().to_dict())

    return app
