from .registrar import QueuePanel
from .controller import PanelContext, QueuesController
