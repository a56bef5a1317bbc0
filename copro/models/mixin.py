from sqlalchemy import Column, DateTime, Integer, func


class BaseMixin:
    """
    모든 모델(테이블)의 공통 컬럼을 정의
    삭제는 hard delete로 처리하므로 soft delete 컬럼은 두지 않습니다.
    """

    id = Column(Integer, primary_key=True, autoincrement=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), index=True)
    updated_at = Column(
        DateTime, server_default=func.now(), onupdate=func.now(), index=True
    )
