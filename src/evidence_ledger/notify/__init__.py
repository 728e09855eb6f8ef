from evidence_ledger.notify.scheduler import DEFAULT_STAGE, NotificationScheduler, bucket_start

__all__ = ["DEFAULT_STAGE", "NotificationScheduler", "bucket_start"]
