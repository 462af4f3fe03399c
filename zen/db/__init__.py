"""PostgreSQL persistence for posture samples (asyncpg). Optional: no url, no writes."""
from zen.db.pool import close_db, get_pool, get_status, init_db
from zen.db.samples import DatabaseSampleSink, LogSampleSink, SampleSink, record_sample

__all__ = [
	"init_db",
	"close_db",
	"get_pool",
	"get_status",
	"record_sample",
	"SampleSink",
	"DatabaseSampleSink",
	"LogSampleSink",
]
