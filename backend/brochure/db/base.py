from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()

# 모델 import는 필요한 곳에서 개별적으로 수행
# 순환 import 방지를 위해 여기서는 import하지 않음


def utcnow() -> datetime:
    """SQLite DateTime 컬럼용 naive UTC 시각"""
    return datetime.now(timezone.utc).replace(tzinfo=None)
