from sqlalchemy import Column, Date, Integer, String
from student_registry.core.database import Base


class Student(Base):
    __tablename__ = "students"
    # SQLite only: never hand out the id of a deleted row again
    __table_args__ = {"sqlite_autoincrement": True}

    student_id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    enrollment_date = Column(Date, nullable=False)
