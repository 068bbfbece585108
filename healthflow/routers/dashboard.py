from fastapi import APIRouter, Depends

from ..database import get_store
from ..responses import success
from ..services.store import RecordStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/statistics")
def statistics(store: RecordStore = Depends(get_store)):
    """Contagens gerais; "hoje" segue a TZ da clínica (settings.TIMEZONE)."""
    return success(store.compute_statistics())
