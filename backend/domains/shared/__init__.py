from .db_base import Base
from .uow import SqlAlchemyUoW
from .repository import SqlAlchemyRepository
from .service_base import ServiceBase, DomainServiceBase

__all__ = [
    "Base",
    # Unit of Work
    "SqlAlchemyUoW",
    # Repository
    "SqlAlchemyRepository",
    # Services
    "ServiceBase",
    "DomainServiceBase",
]
