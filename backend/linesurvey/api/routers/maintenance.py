# backend/linesurvey/api/routers/maintenance.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from linesurvey.db import get_db
from linesurvey.core.config import settings
from linesurvey.services.maintenance.dedupe import remove_duplicate_sessions
from linesurvey.services.maintenance.stats import compute_statistics
from linesurvey.services.store.sheets import find_sheet, read_rows

router = APIRouter()


@router.get("/stats")
def response_stats(db: Session = Depends(get_db)):
    sheet = find_sheet(db, settings.sheet_name)
    return compute_statistics(read_rows(db, sheet) if sheet else [])


@router.post("/dedupe")
def dedupe(db: Session = Depends(get_db)):
    sheet = find_sheet(db, settings.sheet_name)
    if not sheet:
        raise HTTPException(status_code=404, detail="no responses yet")
    return remove_duplicate_sessions(db, sheet)
