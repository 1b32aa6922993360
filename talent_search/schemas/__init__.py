from .profile import CandidateRecord, ProfileCreate, ProfileSource
from .search import AISearchRequest, AISearchResponse

__all__ = [
    'CandidateRecord',
    'ProfileCreate',
    'ProfileSource',
    'AISearchRequest',
    'AISearchResponse'
]
