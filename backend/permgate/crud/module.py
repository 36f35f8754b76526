from ..models.module import Module
from .base import NamedEntityRepository


class ModuleRepository(NamedEntityRepository[Module]):
    model = Module
    label = "Module"
