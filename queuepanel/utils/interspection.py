import importlib
import logging
from typing import Any

from queuepanel.constants import LOGGER_NAME


logger = logging.getLogger(LOGGER_NAME)


def import_obj(path_to_import_obj: str) -> Any:
    """
    Import any python object.

    :param str path_to_import_obj: Path for import object, "package.module.name" or "package.module:name".

    :return: Imported object.

    """
    if ':' in path_to_import_obj:
        module_path, obj_name = path_to_import_obj.split(':', 1)
    else:
        module_path, obj_name = path_to_import_obj.rsplit('.', 1)
    mod = importlib.import_module(module_path)
    return getattr(mod, obj_name)


def get_factory_by_path(path_to_factory: str) -> Any:
    """
    Get queues factory by path to it. Use importlib.import_module.

    :param str path_to_factory: Path to callable for import and return.

    """
    try:
        factory = import_obj(path_to_factory)
    except (ModuleNotFoundError, AttributeError, ValueError) as e:
        logger.warning(f'Object {path_to_factory} import error. {e}')
        raise

    if not callable(factory):
        raise TypeError(f'Object {path_to_factory} is not callable.')
    return factory
