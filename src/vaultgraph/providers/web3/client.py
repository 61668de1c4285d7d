# src/vaultgraph/providers/web3/client.py
"""web3 valuation backend reading the bonding-curve MultiVault contract."""

from typing import Any

from web3 import AsyncHTTPProvider, AsyncWeb3

from vaultgraph.exceptions import ValuationUnavailable
from vaultgraph.providers.base import ValuationBackend

# Read-only subset of the MultiVault ABI used for redemption valuation
MULTIVAULT_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "convertToAssets",
        "stateMutability": "view",
        "inputs": [
            {"name": "termId", "type": "bytes32"},
            {"name": "curveId", "type": "uint256"},
            {"name": "shares", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "convertToShares",
        "stateMutability": "view",
        "inputs": [
            {"name": "termId", "type": "bytes32"},
            {"name": "curveId", "type": "uint256"},
            {"name": "assets", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "getVaultFees",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [
            {
                "name": "",
                "type": "tuple",
                "components": [
                    {"name": "entryFee", "type": "uint256"},
                    {"name": "exitFee", "type": "uint256"},
                    {"name": "protocolFee", "type": "uint256"},
                ],
            }
        ],
    },
]


def term_id_to_bytes32(term_id: str) -> bytes:
    """Convert a 0x-prefixed hex term id to the 32-byte contract argument."""
    raw = bytes.fromhex(term_id.removeprefix("0x"))
    if len(raw) > 32:
        raise ValueError(f"Term id longer than 32 bytes: {term_id}")
    return raw.rjust(32, b"\x00")


class Web3ValuationBackend(ValuationBackend):
    """Valuation backend calling the MultiVault contract over JSON-RPC.

    Example:
        from vaultgraph.providers.web3 import Web3ValuationBackend

        backend = Web3ValuationBackend(
            rpc_url="https://rpc.example",
            vault_address="0x...",
        )
        gross = await backend.convert_to_assets(term_id, 1, 10**18)
    """

    def __init__(self, rpc_url: str, vault_address: str, w3: AsyncWeb3 | None = None) -> None:
        """Initialize the backend.

        Args:
            rpc_url: JSON-RPC endpoint of the chain hosting the vault.
            vault_address: MultiVault contract address.
            w3: Optional preconfigured AsyncWeb3 instance (rpc_url is then ignored).
        """
        self.rpc_url = rpc_url
        self.vault_address = vault_address
        self._w3 = w3 or AsyncWeb3(AsyncHTTPProvider(rpc_url))
        self._contract = self._w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(vault_address),
            abi=MULTIVAULT_ABI,
        )

    async def _call(self, function_name: str, *args: Any) -> Any:
        try:
            return await getattr(self._contract.functions, function_name)(*args).call()
        except Exception as e:
            raise ValuationUnavailable(f"{function_name} call failed: {e}") from e

    async def convert_to_assets(self, term_id: str, curve_id: int, shares: int) -> int:
        return int(
            await self._call("convertToAssets", term_id_to_bytes32(term_id), curve_id, shares)
        )

    async def convert_to_shares(self, term_id: str, curve_id: int, assets: int) -> int:
        return int(
            await self._call("convertToShares", term_id_to_bytes32(term_id), curve_id, assets)
        )

    async def get_vault_fees(self) -> Any:
        return await self._call("getVaultFees")
