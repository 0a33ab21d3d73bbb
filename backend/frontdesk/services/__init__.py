# Services module

from frontdesk.services.local_store import LocalStore, MemoryLocalStore, SqlLocalStore, StorageKeys
from frontdesk.services.connectivity import ConnectivityMonitor
from frontdesk.services.sync_queue import SyncQueue
from frontdesk.services.result import PullResult, ServiceResult, SyncResult
from frontdesk.services.tax import TaxBreakdown, TaxConfig, compute_service_charge, compute_tax
from frontdesk.services.amount_words import number_to_words
