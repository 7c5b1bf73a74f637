from sqlalchemy.orm import Session

from crypto_ramp_service.app.core.errors import ErrorCode, ErrorMessage, not_found
from crypto_ramp_service.app.models.user import User


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise not_found(ErrorCode.USER_NOT_FOUND, ErrorMessage.USER_NOT_FOUND)
    return user
