import enum


class UserRole(enum.Enum):
    Student = "student"
    Faculty = "faculty"
    Admin = "admin"

    @property
    def is_instructor(self) -> bool:
        return self in (UserRole.Faculty, UserRole.Admin)
