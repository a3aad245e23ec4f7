from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.schemas.user import UserCreate, UserOut, TokenOut
from app.utils.auth import create_access_token, get_current_user, require_admin
from app.utils.hashing import hash_password, verify_password

import logging
logger = logging.getLogger("app.auth")


router = APIRouter(prefix="/auth", tags=["Auth"])


# 建立帳號 (由管理者建立，學生帳號 username = 學號)
@router.post("/register", response_model=UserOut)
def register(user_data: UserCreate, db: Session = Depends(get_db), admin=Depends(require_admin)):
    exists = db.query(User).filter(User.username == user_data.username).first()
    if exists:
        raise HTTPException(status_code=400, detail="Username already exists")

    new_user = User(
        username=user_data.username,
        password_hash=hash_password(user_data.password),
        role=user_data.role,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    logger.info("user created username=%s role=%s by=%s", new_user.username, new_user.role, admin.username)
    return new_user


# 登入
@router.post("/login", response_model=TokenOut)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.username == form_data.username).first()
    if not user or not verify_password(form_data.password, user.password_hash):
        logger.warning("login failed username=%s", form_data.username)
        raise HTTPException(status_code=403, detail="Invalid credentials")

    token = create_access_token(user)
    return {"access_token": token, "token_type": "bearer"}


# 取得使用者資料
@router.get("/me", response_model=UserOut)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user
