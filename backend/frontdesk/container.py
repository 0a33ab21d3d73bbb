"""Service wiring: one container per process, holding every collaborator."""

import logging
from typing import Annotated, Optional

from fastapi import Depends, Request

from frontdesk.core.config import Settings, settings as default_settings
from frontdesk.db.session import create_local_engine
from frontdesk.services.auth_service import AuthService
from frontdesk.services.bank_account_service import BankAccountService
from frontdesk.services.bill_service import BillService
from frontdesk.services.checkout_service import CheckoutService
from frontdesk.services.connectivity import ConnectivityMonitor
from frontdesk.services.invoice_service import InvoiceService
from frontdesk.services.local_store import LocalStore, SqlLocalStore, StorageKeys
from frontdesk.services.menu_service import MenuService
from frontdesk.services.receipt_service import ReceiptService
from frontdesk.services.remote.base import RemoteDataService, UnconfiguredDataService
from frontdesk.services.remote.postgrest import PostgrestDataService
from frontdesk.services.room_service import RoomService
from frontdesk.services.sync_coordinator import SyncCoordinator
from frontdesk.services.tax import TaxConfig

logger = logging.getLogger(__name__)


class FrontDeskContainer:
    """Holds the local store, the remote service and every entity service."""

    def __init__(
        self,
        store: LocalStore,
        remote: RemoteDataService,
        connectivity: Optional[ConnectivityMonitor] = None,
        keys: Optional[StorageKeys] = None,
        tax_config: Optional[TaxConfig] = None,
    ):
        self.store = store
        self.remote = remote
        self.connectivity = connectivity or ConnectivityMonitor(online=True, probe=remote.ping)
        self.keys = keys or StorageKeys()
        self.tax_config = tax_config or TaxConfig.from_settings()

        self.rooms = RoomService(store, remote, self.connectivity, self.keys)
        self.receipts = ReceiptService(store, remote, self.connectivity, self.rooms, self.keys, self.tax_config)
        self.bills = BillService(store, remote, self.connectivity, self.keys, self.tax_config)
        self.menu = MenuService(store, remote, self.connectivity, self.keys)
        self.bank_accounts = BankAccountService(store, remote, self.connectivity, self.keys)
        self.auth = AuthService(store, self.keys)
        self.checkout = CheckoutService(self.rooms, self.receipts)
        self.invoices = InvoiceService(self.receipts, self.bills, self.tax_config)
        self.sync = SyncCoordinator(
            self.connectivity,
            {
                "receipts": self.receipts.queue,
                "rooms": self.rooms.queue,
                "bills": self.bills.queue,
            },
        )

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "FrontDeskContainer":
        config = config or default_settings
        store = SqlLocalStore(create_local_engine(config.local_store_url))
        if config.remote_configured:
            remote: RemoteDataService = PostgrestDataService(
                config.remote_url, config.remote_api_key, timeout=config.remote_timeout_seconds
            )
            connectivity = ConnectivityMonitor(online=True, probe=remote.ping)
        else:
            logger.warning("No remote data service configured; running offline")
            remote = UnconfiguredDataService()
            connectivity = ConnectivityMonitor(online=False, probe=remote.ping)
        return cls(store, remote, connectivity, StorageKeys(config.local_store_namespace))


def get_container(request: Request) -> FrontDeskContainer:
    """Dependency returning the container built by the application lifespan."""
    return request.app.state.container


Container = Annotated[FrontDeskContainer, Depends(get_container)]
