from queuepanel.config import PanelConfig
from queuepanel.errors import PanelLoadError
from queuepanel.web.api_errors import ApiRequestError, NotFoundError
from queuepanel.web.registrar import QueuePanel

__version__ = "0.1.0"
