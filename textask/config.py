"""Runtime configuration for textask.

All settings come from environment variables (optionally loaded from a
`.env` file). Column ids default to the ones of the original task table.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


class ColumnIds(BaseModel):
    """Coda column ids of the task table."""
    task_name: str = "c-70z9tdOF3c"
    status: str = "c-kN87N8b6Gr"
    category: str = "c-Ftw3yMGTZb"
    duration: str = "c-L4lltHxi-h"
    task_type: str = "c-eDVIqu2xj_"
    needs_triage: str = "c-2alHSrothg"
    due_date: str = "c-6fCbS7kqIu"


class Settings(BaseModel):
    """Service settings."""

    coda_api_key: Optional[str] = None
    doc_id: Optional[str] = None
    task_table_id: Optional[str] = None
    types_table_id: Optional[str] = None
    categories_table_id: Optional[str] = None
    statuses_table_id: Optional[str] = None
    columns: ColumnIds = Field(default_factory=ColumnIds)

    outbound_phone: Optional[str] = Field(None, description="Only this sender may create tasks")
    twilio_auth_token: Optional[str] = Field(None, description="Enables webhook signature checks when set")
    public_webhook_url: Optional[str] = Field(None, description="URL Twilio signs (defaults to the request URL)")

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    oracle_timeout_sec: float = Field(8.0, gt=0)

    rate_limit_max: int = Field(10, ge=1)
    rate_limit_window_sec: float = Field(3600.0, gt=0)

    timezone: str = "UTC"
    simple_default_status: str = "today"
    structured_default_status: str = "backlog"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment."""
        defaults = ColumnIds()
        columns = ColumnIds(
            task_name=os.getenv("COLUMN_TASK_NAME", defaults.task_name),
            status=os.getenv("COLUMN_STATUS", defaults.status),
            category=os.getenv("COLUMN_CATEGORY", defaults.category),
            duration=os.getenv("COLUMN_DURATION", defaults.duration),
            task_type=os.getenv("COLUMN_TASK_TYPE", defaults.task_type),
            needs_triage=os.getenv("COLUMN_NEEDS_TRIAGE", defaults.needs_triage),
            due_date=os.getenv("COLUMN_DUE_DATE", defaults.due_date),
        )
        return cls(
            coda_api_key=os.getenv("CODA_API_KEY"),
            doc_id=os.getenv("DOC_ID"),
            task_table_id=os.getenv("TASK_TABLE_ID"),
            types_table_id=os.getenv("TYPES_TABLE_ID"),
            categories_table_id=os.getenv("CATEGORIES_TABLE_ID"),
            statuses_table_id=os.getenv("STATUSES_TABLE_ID"),
            columns=columns,
            outbound_phone=os.getenv("OUTBOUND_PHONE"),
            twilio_auth_token=os.getenv("TWILIO_AUTH_TOKEN"),
            public_webhook_url=os.getenv("PUBLIC_WEBHOOK_URL"),
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            oracle_timeout_sec=float(os.getenv("ORACLE_TIMEOUT_SEC", "8")),
            rate_limit_max=int(os.getenv("RATE_LIMIT_MAX", "10")),
            rate_limit_window_sec=float(os.getenv("RATE_LIMIT_WINDOW_SEC", "3600")),
            timezone=os.getenv("TIMEZONE", "UTC"),
            simple_default_status=os.getenv("SIMPLE_DEFAULT_STATUS", "today"),
            structured_default_status=os.getenv("STRUCTURED_DEFAULT_STATUS", "backlog"),
        )
