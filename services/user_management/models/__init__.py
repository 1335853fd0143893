from .users import User
