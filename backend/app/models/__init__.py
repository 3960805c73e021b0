from .user import User
from .user_token import UserToken
from .device_token import DeviceToken
from .category import Category
from .todo import Todo

__all__ = ["User", "UserToken", "DeviceToken", "Category", "Todo"]
