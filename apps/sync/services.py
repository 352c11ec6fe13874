import logging

from fastapi import Request

# Registers the tables on Base.metadata
import apps.customers.models  # noqa: F401
import apps.repairs.models  # noqa: F401
import apps.settings.models  # noqa: F401
from apps.repairs.schemas import RepairStatus
from apps.sync.backend import RepairShopBackend
from apps.sync.gateway import SyncGateway
from apps.sync.mirror import LocalMirror
from apps.sync.schemas import AppState, DashboardStats
from core.database import Base, Settings, build_engine, settings
from core.store import SqlStore

logger = logging.getLogger(__name__)


def build_backend(config: Settings) -> RepairShopBackend:
    """Pick the backend once, from configuration."""
    if config.is_configured:
        logger.info("Using the relational store backend")
        store = SqlStore(build_engine(config.DATABASE_URL), Base.metadata)
        return SyncGateway(store)

    logger.info(f"No DATABASE_URL configured, using the local mirror at {config.LOCAL_MIRROR_PATH}")
    return LocalMirror(config.LOCAL_MIRROR_PATH)


def dashboard_stats(state: AppState) -> DashboardStats:
    return DashboardStats(
        total=len(state.repairs),
        active=sum(1 for r in state.repairs if not r.status.is_terminal),
        delivered=sum(1 for r in state.repairs if r.status == RepairStatus.DELIVERED),
        customers=len(state.customers),
    )


# Dependency injection
def get_backend(request: Request) -> RepairShopBackend:
    backend = getattr(request.app.state, "backend", None)
    if backend is None:
        backend = build_backend(settings)
        request.app.state.backend = backend
    return backend
