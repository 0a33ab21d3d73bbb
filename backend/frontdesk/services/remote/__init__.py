"""Remote tabular data service clients."""

from frontdesk.services.remote.base import Filter, RemoteDataService, UnconfiguredDataService
from frontdesk.services.remote.postgrest import PostgrestDataService
