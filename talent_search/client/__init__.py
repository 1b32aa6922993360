from .notifications import Notification, NotificationCenter, NotificationVariant
from .session import SessionProvider
from .search_client import AISearchClient
from .profile_directory import ProfileDirectory
from .profile_creator import ProfileCreator

__all__ = [
    'Notification',
    'NotificationCenter',
    'NotificationVariant',
    'SessionProvider',
    'AISearchClient',
    'ProfileDirectory',
    'ProfileCreator'
]
