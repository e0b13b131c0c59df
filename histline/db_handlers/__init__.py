from histline.db_handlers.base import BaseDBHandler, check_local_db
from histline.db_handlers.dataset import DatasetDBHandler
from histline.db_handlers.timeline import TimelineDBHandler

__all__ = [
    "BaseDBHandler",
    "check_local_db",
    "DatasetDBHandler",
    "TimelineDBHandler",
]
