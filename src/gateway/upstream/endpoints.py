"""URL builders for the Synthos backend and AI analyzer."""

from urllib.parse import quote

from gateway.config import UpstreamSettings


class BackendEndpoints:
    """Builds absolute upstream URLs from the configured base URLs."""

    def __init__(self, settings: UpstreamSettings) -> None:
        self._backend = settings.backend_url.rstrip("/")
        self._ai_analyzer = settings.ai_analyzer_url.rstrip("/")

    # AI analyzer

    def ai_analyzer(self, address: str) -> str:
        return f"{self._ai_analyzer}/api/analyze/{quote(address, safe='')}"

    # Accounts

    def balance(self, address: str) -> str:
        return f"{self._backend}/accounts/balance/{quote(address, safe='')}"

    def holdings(self, address: str) -> str:
        return f"{self._backend}/accounts/holdings/{quote(address, safe='')}"

    # Actions

    def deposit(self) -> str:
        return f"{self._backend}/action/deposit"

    def looping_deposit(self) -> str:
        return f"{self._backend}/action/looping-deposit"

    def withdraw(self) -> str:
        return f"{self._backend}/action/withdraw"

    def withdraw_tracking(self) -> str:
        return f"{self._backend}/action/withdraw-with-tracking"

    def update_deposit_tx(self) -> str:
        return f"{self._backend}/action/update-deposit-transaction"

    def update_withdraw_tx(self) -> str:
        return f"{self._backend}/action/update-withdraw-transaction"

    # Protocols

    def minimum_deposits(self) -> str:
        return f"{self._backend}/protocol/minimum-deposits"

    def protocol_pairs(self) -> str:
        return f"{self._backend}/protocol/protocol-pairs"

    def protocol_pairs_apy(self) -> str:
        return f"{self._backend}/protocol/protocol-pairs-apy"

    def protocol_pairs_apy_single(self, protocol_id: str) -> str:
        return f"{self._backend}/protocol/protocol-pairs-apy/{quote(protocol_id, safe='')}"

    def protocols(self) -> str:
        return f"{self._backend}/protocol/protocols"
