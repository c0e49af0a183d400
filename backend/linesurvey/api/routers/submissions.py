from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
import json
import logging

from linesurvey.db import get_db
from linesurvey.core.constants import PING_MESSAGE
from linesurvey.schemas.submission import SubmissionAck
from linesurvey.services.ingest import now_iso, record_submission

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
@router.get("/")
def ping():
    # 疎通確認
    return {"success": True, "message": PING_MESSAGE, "timestamp": now_iso()}


@router.post("")
@router.post("/")
async def submit(request: Request, db: Session = Depends(get_db)):
    # Content-Type を問わず本文を JSON として解釈する（text/plain 送信にも対応）
    raw = await request.body()
    try:
        payload = json.loads(raw or b"null")
    except ValueError as e:
        logger.warning("unparseable submission body: %s", e)
        return SubmissionAck(success=False, error=f"Invalid JSON body: {e}").as_response()
    ack = await run_in_threadpool(record_submission, db, payload)
    return ack.as_response()
