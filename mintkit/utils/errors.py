from __future__ import annotations

from fastapi.responses import JSONResponse


class MintKitError(Exception):
    """Base class for errors raised by the mint pipeline."""


class DetectionError(MintKitError):
    """A platform probe returned something that is not a valid answer."""


class FieldReadError(MintKitError):
    """One contract field could not be read. Always defaulted locally."""


class ChainUnavailableError(MintKitError):
    """The chain endpoint could not be reached at all."""


class ConfigurationError(MintKitError):
    pass


class MonitorActiveError(ConfigurationError):
    pass


class SimulationError(MintKitError):
    def __init__(
        self, reason: str, selector: str | None = None, hints: list[str] | None = None
    ):
        self.reason = reason
        self.selector = selector
        self.hints = hints or []
        context = f" ({'; '.join(self.hints)})" if self.hints else ""
        super().__init__(f"Simulation Failed: {reason}{context}")


class SignerUnavailableError(MintKitError):
    """A transaction was requested but no private key is configured."""


class GasEstimationError(MintKitError):
    pass


class ExecutionError(MintKitError):
    """Submission failed before the transaction reached a block."""


class ReceiptRevertError(MintKitError):
    """The transaction was mined but reverted; gas was still spent."""

    def __init__(self, tx_hash: str, block_number: int | None = None):
        self.tx_hash = tx_hash
        self.block_number = block_number
        super().__init__(
            f"Transaction {tx_hash} reverted on-chain"
            + (f" in block {block_number}" if block_number is not None else "")
        )


def error_response(
    status_code: int, message: str, received_body: dict | None = None
) -> JSONResponse:
    content: dict = {"error": message}
    if received_body is not None:
        content["received_body"] = received_body
    return JSONResponse(status_code=status_code, content=content)
