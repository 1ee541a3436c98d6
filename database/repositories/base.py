from sqlalchemy.orm import Session


class BaseRepository:
    """Shares the caller's Session; transaction control stays with the unit of work."""

    def __init__(self, db: Session):
        self.db = db
