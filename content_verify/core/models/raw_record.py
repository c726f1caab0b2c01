"""
RawRecord model representing one source row as read from tbl_verify_content.
"""

from pydantic import BaseModel


class RawRecord(BaseModel):
    """
    A single source row handed to the content processor (immutable).

    Attributes:
        record_id: Source primary key, carried forward as the output id when present
        task_id: Review task identifier (the taskId column)
        content: Opaque JSON text produced by the review tool (may be null)
    """

    record_id: str | None = None
    task_id: str = ""
    content: str | None = None

    class Config:
        frozen = True
        coerce_numbers_to_str = True
        json_schema_extra = {
            "example": {
                "record_id": "1024",
                "task_id": "430aa1b775c143e6bfcf1d5f78c115ce",
                "content": "{\"data\": {\"checkresultstr\": \"...\", \"checkresultjson\": \"[]\"}}",
            }
        }
