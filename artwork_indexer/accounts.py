"""Account registry: one account per chain address, created on first sight."""

from typing import Union

import structlog

from .chain import normalize_address
from .db.models import AccountModel
from .store import EntityStore

logger = structlog.get_logger()


class AccountRegistry:
    """Maps addresses to account records."""

    def __init__(self, store: EntityStore):
        self.store = store

    def get_or_create(self, address: Union[str, bytes]) -> AccountModel:
        """Return the account for ``address``, creating it if needed.

        Existing accounts are returned untouched; nothing is saved on
        that path.
        """
        account_id = normalize_address(address)
        account = self.store.load(AccountModel, account_id)
        if account is not None:
            return account

        account = AccountModel(id=account_id)
        self.store.save(account)
        logger.debug("account_created", account_id=account_id)
        return account
