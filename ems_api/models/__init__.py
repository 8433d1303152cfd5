import importlib
import pkgutil


def load_all():
    """Import every model module (payroll subpackage included) so db.metadata sees all tables."""
    loaded = []
    for info in pkgutil.walk_packages(__path__, prefix=f"{__name__}."):
        importlib.import_module(info.name)
        loaded.append(info.name)
    return loaded
