from datetime import date

from pydantic import BaseModel, ConfigDict


class Student(BaseModel):
    student_id: int
    first_name: str
    last_name: str
    email: str
    enrollment_date: date

    model_config = ConfigDict(from_attributes=True)


# Column order used for tabular output
STUDENT_FIELDS = tuple(Student.model_fields)
