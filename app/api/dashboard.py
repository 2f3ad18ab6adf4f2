from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.dashboard_service import DashboardService
from app.schemas.ledger import DashboardResponse

router = APIRouter(prefix="/api", tags=["Dashboard"])


@router.get(
    "/data",
    response_model=DashboardResponse,
    summary="Dashboard data",
    description="Get all products and sales in one response."
)
def dashboard_data(db: Session = Depends(get_db)):
    """Combined products and sales for the dashboard."""
    service = DashboardService(db)
    return service.get_data()
