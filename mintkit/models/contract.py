from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class Platform(str, Enum):
    NFTS2ME = "nfts2me"
    OPENSEA = "opensea"
    MAGICEDEN = "magiceden"
    SCATTER = "scatter"
    DUTCH_AUCTION = "dutchauction"
    THIRDWEB = "thirdweb"
    ZORA = "zora"
    MANIFOLD = "manifold"
    GENERIC = "generic"


class TokenStandard(str, Enum):
    ERC721 = "ERC721"
    ERC1155 = "ERC1155"


class FeeModel(str, Enum):
    NONE = "none"  # price * qty
    PER_TOKEN = "per_token"  # (price + protocol_fee) * qty
    PER_TRANSACTION = "per_transaction"  # price * qty + protocol_fee


class ContractTarget(BaseModel):
    address: str
    chain_id: int

    model_config = {"frozen": True}


class ContractSnapshot(BaseModel):
    address: str
    chain_id: int
    name: str = "Unknown"
    platform: Platform = Platform.GENERIC
    token_standard: TokenStandard = TokenStandard.ERC721
    mint_function_signature: str = "mint(uint256)"
    mint_price_per_token: int = 0
    protocol_fee: int = 0
    creator_fee: int = 0  # informational, not part of the payable value
    fee_model: FeeModel = FeeModel.NONE
    is_active: bool = False
    total_supply: int | None = None
    max_supply: int | None = None
    max_per_wallet: int | None = None
    # Singleton drops are minted through this contract instead of the token
    router_address: str | None = None
    # Payment currency for claim-condition drops (native sentinel otherwise)
    currency: str | None = None
    # bytes32 list key for invite-keyed stores, 0x-prefixed hex
    invite_key: str | None = None

    model_config = {"frozen": True}

    @property
    def target(self) -> ContractTarget:
        return ContractTarget(address=self.address, chain_id=self.chain_id)

    @property
    def call_target(self) -> str:
        return self.router_address or self.address

    def total_value(self, quantity: int) -> int:
        """Native amount to send for ``quantity`` tokens under this fee model."""
        if quantity < 1:
            raise ValueError(f"Quantity must be at least 1, got {quantity}")
        if self.fee_model == FeeModel.PER_TOKEN:
            return (self.mint_price_per_token + self.protocol_fee) * quantity
        if self.fee_model == FeeModel.PER_TRANSACTION:
            return self.mint_price_per_token * quantity + self.protocol_fee
        return self.mint_price_per_token * quantity
