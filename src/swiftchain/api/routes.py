from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from swiftchain.api.schemas import (
    ConvertRequestSchema,
    ErrorResponseSchema,
    RegisterTransactionSchema,
    SendCryptoSchema,
    WithdrawalRequestSchema,
)
from swiftchain.core.errors import MissingField, SwiftChainError
from swiftchain.utils.helpers import isoformat, utc_now

api = Blueprint("api", __name__, url_prefix="/api")


def services():
    return current_app.extensions["swiftchain"]


def _body():
    return request.get_json(silent=True) or {}


def _error(code, message, status):
    payload = ErrorResponseSchema(error=code, message=message)
    return jsonify(payload.model_dump()), status


@api.errorhandler(SwiftChainError)
def handle_service_error(err):
    return _error(err.code, err.message, err.status_code)


@api.errorhandler(ValidationError)
def handle_validation_error(err):
    first = err.errors()[0] if err.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = f"{location}: {first.get('msg', 'invalid value')}" if location else str(err)
    return _error("validation_error", message, 400)


@api.route("/health", methods=["GET"])
def health():
    return jsonify(
        {
            "status": "OK",
            "message": "SwiftChain API is running",
            "timestamp": isoformat(utc_now()),
        }
    )


# ----------------------------------------------------------------------
# Conversion
# ----------------------------------------------------------------------
@api.route("/convert", methods=["POST"])
def convert():
    data = ConvertRequestSchema.model_validate(_body())
    quote = services().calculator.convert(data.amount, data.currency)
    return jsonify(quote.to_dict())


@api.route("/rates", methods=["GET"])
def rates():
    table = services().rate_source.get_rates()
    return jsonify(table.to_dict())


@api.route("/fee-comparison", methods=["GET"])
def fee_comparison():
    report = services().fee_comparator.compare(request.args.get("amount"))
    return jsonify(report.to_dict())


# ----------------------------------------------------------------------
# Transactions
# ----------------------------------------------------------------------
@api.route("/transactions/register", methods=["POST"])
def register_transaction():
    data = RegisterTransactionSchema.model_validate(_body())
    record = services().tracker.register(
        data.hash,
        from_address=data.from_address,
        to_address=data.to_address,
        amount=data.amount,
        currency=str(data.currency or "USDT").upper(),
        gas_used=data.gas_used,
        gas_price=data.gas_price,
    )
    return jsonify({"success": True, "transaction": record.to_dict()}), 201


@api.route("/transactions/<tx_hash>", methods=["GET"])
def transaction_status(tx_hash):
    # advances the simulated confirmation count
    record = services().tracker.poll(tx_hash)
    return jsonify({"success": True, "transaction": record.to_dict()})


@api.route("/transactions/<tx_hash>/fail", methods=["POST"])
def fail_transaction(tx_hash):
    record = services().tracker.mark_failed(tx_hash)
    return jsonify({"success": True, "transaction": record.to_dict()})


# ----------------------------------------------------------------------
# Wallet
# ----------------------------------------------------------------------
@api.route("/crypto/send", methods=["POST"])
def send_crypto():
    data = SendCryptoSchema.model_validate(_body())
    if not data.to_address:
        raise MissingField("toAddress")
    if data.amount is None:
        raise MissingField("amount")

    svc = services()
    receipt = svc.wallet.send_transaction(data.to_address, data.amount, data.asset)
    record = svc.tracker.register(
        receipt.hash,
        from_address=receipt.from_address,
        to_address=receipt.to_address,
        amount=receipt.amount,
        currency=receipt.asset,
        gas_used=receipt.gas_used,
        gas_price=receipt.gas_price,
    )
    return jsonify({"success": True, "transaction": record.to_dict()}), 201


@api.route("/crypto/balance/<address>", methods=["GET"])
def wallet_balance(address):
    wallet = services().wallet
    balances = {
        asset: str(wallet.get_balance(address, asset)) for asset in ("ETH", "USDT")
    }
    return jsonify(
        {"address": address, "balances": balances, "timestamp": isoformat(utc_now())}
    )


# ----------------------------------------------------------------------
# Withdrawals
# ----------------------------------------------------------------------
@api.route("/withdrawals", methods=["POST"])
def submit_withdrawal():
    data = WithdrawalRequestSchema.model_validate(_body())
    withdrawal = services().withdrawals.submit(data.amount, data.bank_details)
    return jsonify(
        {
            "success": True,
            "withdrawal": withdrawal.to_dict(),
            "message": "Withdrawal request submitted successfully",
        }
    ), 201


@api.route("/withdrawals/<withdrawal_id>", methods=["GET"])
def withdrawal_status(withdrawal_id):
    withdrawal = services().withdrawals.get(withdrawal_id)
    return jsonify({"success": True, "withdrawal": withdrawal.to_dict()})


def register_routes(app):
    app.register_blueprint(api)

    @app.errorhandler(404)
    def not_found(_err):
        return _error("not_found", "Route not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(_err):
        return _error("method_not_allowed", "Method not allowed", 405)

    @app.errorhandler(500)
    def internal_error(_err):
        return _error(SwiftChainError.code, "Internal server error", 500)
