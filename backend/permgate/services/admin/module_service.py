from .named_service import NamedEntityService


class ModuleService(NamedEntityService):
    repository_name = "modules"
