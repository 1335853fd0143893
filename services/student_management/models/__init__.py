from .students import Student
