from datetime import datetime, timezone

from sqlalchemy import Column, DateTime


def now_utc_naive() -> datetime:
    """Current UTC time without tzinfo, the form every timestamp column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def naive_timestamp_column(*, nullable: bool = False, index: bool = False) -> Column:
    # Plain DateTime; newer SQLModel releases reject naive values in their own type.
    return Column(DateTime(timezone=False), nullable=nullable, index=index)
