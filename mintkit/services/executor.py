from __future__ import annotations

import logging

import httpx
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import to_hex

from mintkit.config import settings
from mintkit.models.transaction import MintReceipt, PreparedTransaction
from mintkit.services.rpc import EvmRpcClient, RpcError
from mintkit.utils.address import normalize_address
from mintkit.utils.errors import ExecutionError, ReceiptRevertError

logger = logging.getLogger("executor")


def clean_submission_error(error: Exception) -> str:
    message = error.message if isinstance(error, RpcError) else str(error)
    if "insufficient funds" in message.lower():
        return "Insufficient Funds for Gas/Price"
    if "nonce too low" in message.lower():
        return "Nonce too low (a transaction from this account was already mined)"
    return message or error.__class__.__name__


def _quantity(value) -> int | None:
    if value is None:
        return None
    return int(value, 16) if isinstance(value, str) else int(value)


class MintExecutor:
    """Signs a prepared transaction locally and submits it exactly once."""

    def __init__(
        self,
        client: EvmRpcClient,
        account: LocalAccount,
        chain_id: int,
        receipt_timeout: float = settings.receipt_timeout_seconds,
        receipt_poll_interval: float = settings.receipt_poll_seconds,
    ):
        self._client = client
        self.account = account
        self.chain_id = chain_id
        self.receipt_timeout = receipt_timeout
        self.receipt_poll_interval = receipt_poll_interval

    @classmethod
    def from_private_key(cls, client: EvmRpcClient, private_key: str, chain_id: int, **kwargs):
        return cls(client, Account.from_key(private_key), chain_id, **kwargs)

    @property
    def address(self) -> str:
        return self.account.address

    async def sign(self, tx: PreparedTransaction) -> str:
        nonce = await self._client.eth_get_transaction_count(self.address, "pending")
        params = {
            "type": 2,
            "chainId": self.chain_id,
            "nonce": nonce,
            "to": normalize_address(tx.to),
            "value": tx.value,
            "data": tx.data,
            "gas": tx.gas_limit,
            "maxFeePerGas": tx.max_fee_per_gas,
            "maxPriorityFeePerGas": tx.max_priority_fee_per_gas,
        }
        signed = self.account.sign_transaction(params)
        return to_hex(signed.raw_transaction)

    async def submit(self, tx: PreparedTransaction, wait: bool = True) -> MintReceipt:
        try:
            raw_tx = await self.sign(tx)
            tx_hash = await self._client.eth_send_raw_transaction(raw_tx)
        except (RpcError, httpx.HTTPError) as e:
            reason = clean_submission_error(e)
            logger.error(f"Mint submission failed: {reason}")
            raise ExecutionError(reason) from e

        logger.info(f"TX sent: {tx_hash}")
        if not wait:
            return MintReceipt(tx_hash=tx_hash)

        try:
            receipt = await self._client.wait_for_receipt(
                tx_hash, timeout=self.receipt_timeout, poll_interval=self.receipt_poll_interval
            )
        except TimeoutError as e:
            raise ExecutionError(
                f"Transaction {tx_hash} was sent but no receipt arrived "
                f"within {self.receipt_timeout:.0f}s"
            ) from e
        except (RpcError, httpx.HTTPError) as e:
            raise ExecutionError(
                f"Transaction {tx_hash} was sent but its receipt could not be read: {e}"
            ) from e

        block_number = _quantity(receipt.get("blockNumber"))
        gas_used = _quantity(receipt.get("gasUsed"))
        if _quantity(receipt.get("status")) != 1:
            logger.error(f"TX {tx_hash} reverted in block {block_number}")
            raise ReceiptRevertError(tx_hash, block_number)

        logger.info(f"TX {tx_hash} confirmed in block {block_number}, gas used {gas_used}")
        return MintReceipt(
            tx_hash=tx_hash, status="success", block_number=block_number, gas_used=gas_used
        )
