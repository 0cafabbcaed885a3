from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursegrid.api.deps import get_db
from coursegrid.schemas.sync import OrphanReportOut, SyncRequest, SyncResultOut, SyncStatusOut
from coursegrid.services.orphan_cleanup import cleanup_orphans, find_orphans
from coursegrid.services.schedule_sync import sync_all, sync_scoped, sync_status

router = APIRouter()


@router.post("/sync/all", response_model=SyncResultOut)
def run_sync_all(db: Session = Depends(get_db)) -> SyncResultOut:
    result = sync_all(db)
    db.commit()
    return result.as_dict()


@router.get("/sync/all", response_model=SyncStatusOut)
def get_sync_status(db: Session = Depends(get_db)) -> SyncStatusOut:
    return sync_status(db)


@router.post("/sync/regenerate", response_model=SyncResultOut)
def run_scoped_sync(payload: SyncRequest, db: Session = Depends(get_db)) -> SyncResultOut:
    result = sync_scoped(db, student_id=payload.student_id, course_id=payload.course_id)
    db.commit()
    return result.as_dict()


@router.get("/cleanup", response_model=OrphanReportOut)
def get_orphans(db: Session = Depends(get_db)) -> OrphanReportOut:
    return find_orphans(db).as_dict()


@router.delete("/cleanup", response_model=OrphanReportOut)
def run_cleanup(db: Session = Depends(get_db)) -> OrphanReportOut:
    report = cleanup_orphans(db)
    db.commit()
    return report.as_dict()
