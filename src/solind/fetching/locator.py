from __future__ import annotations

import logging

from solind.core.errors import LocatorError, RpcError
from solind.core.interfaces import ILedgerRpc
from solind.core.models import Address
from solind.fetching.backoff import RetryPolicy, is_rate_limit_error


class AddressLocator:
    """Lists the addresses of all program accounts with an exact data size."""

    def __init__(self, rpc: ILedgerRpc, policy: RetryPolicy) -> None:
        self.rpc = rpc
        self.policy = policy
        self.logger = logging.getLogger(self.__class__.__name__)

    async def _query(self, program_id: Address, data_size: int) -> list[Address]:
        accounts = await self.rpc.get_program_accounts(program_id, data_size=data_size)
        return [address for address, _blob in accounts]

    async def locate(self, program_id: Address, data_size: int) -> list[Address]:
        """
        Return the ordered addresses owned by `program_id` with `data_size` bytes.

        A rate-limited query is retried once after the base delay; any other
        failure, or a second rate limit, is fatal.

        Raises:
            LocatorError: If the listing cannot be obtained.
        """
        self.logger.info(f"Listing {data_size}-byte accounts of program {program_id}...")
        try:
            addresses = await self._query(program_id, data_size)
        except RpcError as e:
            if not is_rate_limit_error(e):
                raise LocatorError(f"getProgramAccounts failed: {e}") from e
            self.logger.warning(
                f"Rate limited while listing accounts, retrying in "
                f"{self.policy.limits.base_delay_ms / 1000:.2f}s"
            )
            await self.policy.pause_ms(self.policy.limits.base_delay_ms)
            try:
                addresses = await self._query(program_id, data_size)
            except RpcError as retry_error:
                raise LocatorError(f"getProgramAccounts failed after retry: {retry_error}") from retry_error

        self.logger.info(f"Found {len(addresses)} program accounts.")
        return addresses
