from repositories.applications import ApplicationRepository, SqlAlchemyApplicationRepository
from repositories.memory import InMemoryApplicationRepository, InMemoryUserRepository
from repositories.users import SqlAlchemyUserRepository, UserRepository

__all__ = [
    "ApplicationRepository",
    "SqlAlchemyApplicationRepository",
    "InMemoryApplicationRepository",
    "UserRepository",
    "SqlAlchemyUserRepository",
    "InMemoryUserRepository",
]
