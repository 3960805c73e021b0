from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.api.deps import AuthContext, get_auth_context
from app.core.database import get_session
from app.crud import categories as crud
from app.schemas.category import CategoryIn, CategoryOut

router = APIRouter(prefix="/categories", tags=["categories"])

@router.get("", response_model=list[CategoryOut])
def list_categories(auth: AuthContext = Depends(get_auth_context), session: Session = Depends(get_session)):
    return crud.list_categories(session, auth.user_id)

@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, auth: AuthContext = Depends(get_auth_context), session: Session = Depends(get_session)):
    return crud.get_category(session, auth.user_id, category_id)

@router.post("", response_model=CategoryOut, status_code=201)
def create_category(data: CategoryIn, auth: AuthContext = Depends(get_auth_context), session: Session = Depends(get_session)):
    return crud.create_category(session, auth.user_id, data.name)

@router.put("/{category_id}", response_model=CategoryOut)
def update_category(category_id: int, data: CategoryIn, auth: AuthContext = Depends(get_auth_context), session: Session = Depends(get_session)):
    return crud.update_category(session, auth.user_id, category_id, data.name)

@router.delete("/{category_id}")
def delete_category(category_id: int, auth: AuthContext = Depends(get_auth_context), session: Session = Depends(get_session)):
    crud.delete_category(session, auth.user_id, category_id)
    return {"message": "Category deleted"}
