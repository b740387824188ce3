import sqlalchemy
import sqlalchemy.orm
import library_service.models.base
import library_service.models.status

_STATUS_CHECK = "status IN ({})".format(
    ", ".join(f"'{label}'" for label in library_service.models.status.STORED_LABELS)
)


class LibraryEntry(library_service.models.base.Base):
    __tablename__ = "mylibrary"
    __table_args__ = (
        sqlalchemy.UniqueConstraint("user_id", "book_id", name="uq_mylibrary_user_book"),
        sqlalchemy.CheckConstraint(_STATUS_CHECK, name="check_mylibrary_status"),
        {"schema": "libraryservice"}
    )

    id: sqlalchemy.orm.Mapped[int] = sqlalchemy.orm.mapped_column(
        sqlalchemy.Integer, primary_key=True, autoincrement=True
    )
    user_id: sqlalchemy.orm.Mapped[int] = sqlalchemy.orm.mapped_column(
        sqlalchemy.Integer, nullable=False
    )
    book_id: sqlalchemy.orm.Mapped[int] = sqlalchemy.orm.mapped_column(
        sqlalchemy.Integer, nullable=False
    )
    status: sqlalchemy.orm.Mapped[str] = sqlalchemy.orm.mapped_column(
        sqlalchemy.String, nullable=False
    )

    @property
    def reading_status(self) -> library_service.models.status.ReadingStatus:
        return library_service.models.status.from_stored(self.status)
