"""
Operating-system and COM collaborators of the ConnectionManager.

The defaults talk to Windows through pywin32. Both collaborators are
injectable so that discovery and attach logic run anywhere; using a default
where pywin32 is missing raises UnavailableSessionError.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import logging

from ..core.constants import MINIMUM_SUPPORTED_VERSION
from ..core.data_models import SessionDescriptor
from ..core.errors import UnavailableSessionError

logger = logging.getLogger(__name__)

try:
    import pythoncom
    import pywintypes
    import win32api
    import win32con
    import win32gui
    import win32process
    import win32com.client
    PYWIN32_AVAILABLE = True
except ImportError:
    PYWIN32_AVAILABLE = False
    logger.debug("pywin32 not available - ETABS sessions cannot be discovered or attached")


def _require_pywin32() -> None:
    if not PYWIN32_AVAILABLE:
        raise UnavailableSessionError(
            "pywin32 is required to talk to ETABS. "
            "Install with: pip install pywin32 (Windows only)"
        )


class ProcessProbe(ABC):
    """Enumerates running ETABS processes."""

    @abstractmethod
    def list_processes(
        self,
        process_name: str,
        min_supported_version: int = MINIMUM_SUPPORTED_VERSION,
    ) -> List[SessionDescriptor]:
        """Return one descriptor per readable process named process_name."""
        pass


class ComGateway(ABC):
    """Obtains the native application object (cOAPI)."""

    @abstractmethod
    def get_object(self, progid: str, helper_progid: str) -> Any:
        """Attach to the running application registered under progid."""
        pass

    @abstractmethod
    def create_object(self, progid: str, helper_progid: str, program_path: Optional[str] = None) -> Any:
        """Instantiate a new application, from program_path or the latest install."""
        pass

    @abstractmethod
    def api_version(self, helper_progid: str) -> float:
        """API version number reported by the helper; 0.0 when unknown."""
        pass


class Win32ProcessProbe(ProcessProbe):
    """Process enumeration through win32process / win32api / win32gui."""

    def list_processes(
        self,
        process_name: str,
        min_supported_version: int = MINIMUM_SUPPORTED_VERSION,
    ) -> List[SessionDescriptor]:
        _require_pywin32()
        windows = self._main_windows()
        descriptors = []
        for pid in win32process.EnumProcesses():
            if pid == 0:
                continue
            path = self._executable_path(pid)
            if path is None or Path(path).stem.lower() != process_name.lower():
                continue
            major, minor, build = self._file_version(path)
            title = windows.get(pid)
            descriptors.append(SessionDescriptor(
                process_id=pid,
                process_name=Path(path).stem,
                executable_path=path,
                major_version=major,
                minor_version=minor,
                build_version=build,
                has_main_window=title is not None,
                window_title=title or "",
                min_supported_version=min_supported_version,
            ))
        return descriptors

    @staticmethod
    def _executable_path(pid: int) -> Optional[str]:
        try:
            handle = win32api.OpenProcess(
                win32con.PROCESS_QUERY_INFORMATION | win32con.PROCESS_VM_READ, False, pid)
        except pywintypes.error:
            # Access denied for system processes
            return None
        try:
            return win32process.GetModuleFileNameEx(handle, 0)
        except pywintypes.error:
            return None
        finally:
            win32api.CloseHandle(handle)

    @staticmethod
    def _file_version(path: str) -> Tuple[int, int, int]:
        try:
            info = win32api.GetFileVersionInfo(path, "\\")
        except pywintypes.error as e:
            logger.debug(f"Could not read version of {path}: {e}")
            return 0, 0, 0
        ms, ls = info["FileVersionMS"], info["FileVersionLS"]
        return win32api.HIWORD(ms), win32api.LOWORD(ms), win32api.HIWORD(ls)

    @staticmethod
    def _main_windows() -> Dict[int, str]:
        """Map process id -> title of its visible, unowned, titled top-level window."""
        windows: Dict[int, str] = {}

        def callback(hwnd, _):
            if not win32gui.IsWindowVisible(hwnd):
                return True
            if win32gui.GetWindow(hwnd, win32con.GW_OWNER):
                return True
            title = win32gui.GetWindowText(hwnd)
            if title:
                _, pid = win32process.GetWindowThreadProcessId(hwnd)
                windows.setdefault(pid, title)
            return True

        win32gui.EnumWindows(callback, None)
        return windows


class Win32ComGateway(ComGateway):
    """COM access through win32com.client.

    The helper is bound through the generated ETABSv1 type library
    (gencache) so that ByRef outputs come back as result tuples.
    """

    def __init__(self):
        self._initialized = False

    def _helper(self, helper_progid: str) -> Any:
        _require_pywin32()
        if not self._initialized:
            pythoncom.CoInitialize()
            self._initialized = True
        try:
            return win32com.client.gencache.EnsureDispatch(helper_progid)
        except pywintypes.com_error as e:
            logger.debug(f"Type library binding failed for {helper_progid}, using dynamic dispatch: {e}")
            return win32com.client.Dispatch(helper_progid)

    def get_object(self, progid: str, helper_progid: str) -> Any:
        helper = self._helper(helper_progid)
        return helper.GetObject(progid)

    def create_object(self, progid: str, helper_progid: str, program_path: Optional[str] = None) -> Any:
        helper = self._helper(helper_progid)
        if program_path:
            return helper.CreateObject(program_path)
        return helper.CreateObjectProgID(progid)

    def api_version(self, helper_progid: str) -> float:
        helper = self._helper(helper_progid)
        try:
            return float(helper.GetOAPIVersionNumber())
        except (pywintypes.com_error, AttributeError, TypeError, ValueError) as e:
            logger.debug(f"Could not read API version: {e}")
            return 0.0
