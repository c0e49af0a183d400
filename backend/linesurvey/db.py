from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from pathlib import Path
import logging

# モデル定義側の Base（linesurvey.models.base）を利用してメタデータを統一
from linesurvey.models.base import Base
from linesurvey.core.config import settings

logger = logging.getLogger(__name__)

# 1) DATABASE_URL が指定されていれば優先（例: postgresql+psycopg://...）
# 2) それ以外は data_dir 配下の SQLite を使用
if settings.database_url:
    SQLALCHEMY_DATABASE_URL = settings.database_url
    _is_sqlite = SQLALCHEMY_DATABASE_URL.startswith("sqlite")
else:
    db_path = Path(settings.data_dir) / "line_survey.db"
    db_path.parent.mkdir(parents=True, exist_ok=True)
    SQLALCHEMY_DATABASE_URL = f"sqlite:///{db_path}"
    _is_sqlite = True

_connect_args = {"check_same_thread": False} if _is_sqlite else {}

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args=_connect_args,
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    # モデルを明示 import してメタデータ登録を確実化
    import linesurvey.models.sheet  # noqa: F401
    import linesurvey.models.sheet_row  # noqa: F401
    Base.metadata.create_all(bind=engine)
    logger.info("database ready at %s", engine.url.render_as_string(hide_password=True))


def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
