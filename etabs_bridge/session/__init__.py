# Session lifecycle: discovery, attach, model handle, units
from .connection import ConnectionManager
from .model_handle import ModelHandle
from .platform import PYWIN32_AVAILABLE, ComGateway, ProcessProbe, Win32ComGateway, Win32ProcessProbe
from .units import UnitSystemCache
