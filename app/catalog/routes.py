from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.catalog.catalog import list_categories, get_category
from app.catalog.schemas import HabitCategoryOut
from app.db.session import get_db

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/categories", response_model=List[HabitCategoryOut])
def get_categories(
    kind: Optional[str] = Query(None, description="build | break"),
    q: Optional[str] = Query(None, description="Search in name and description"),
    db: Session = Depends(get_db),
):
    # Categories are public reference data; no auth needed
    return list_categories(db, kind=kind, search=q)


@router.get("/categories/{category_id}", response_model=HabitCategoryOut)
def get_category_by_id(category_id: int, db: Session = Depends(get_db)):
    return get_category(db, category_id)
