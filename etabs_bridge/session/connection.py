"""
Connection Manager - discover, attach to or create ETABS sessions.

Usage:
    manager = ConnectionManager()
    with manager.attach() as handle:
        names = handle.points.names()
"""

from typing import Any, Iterable, List, Optional
import logging

from ..core.config import BridgeConfig
from ..core.constants import RETURN_LOCAL_FAILURE
from ..core.data_models import ManagerCallContext, SessionDescriptor
from ..core.errors import (
    EtabsError,
    NativeCallError,
    UnavailableSessionError,
    UnsupportedVersionError,
    ValidationError,
    require_range,
)
from ..core.mapper import split_native
from ..core.observers import CallObserver
from .model_handle import ModelHandle
from .platform import ComGateway, ProcessProbe, Win32ComGateway, Win32ProcessProbe

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Entry point producing ModelHandles.

    Args:
        config: Bridge configuration (defaults when omitted)
        probe: Process enumeration collaborator (pywin32 by default)
        gateway: COM collaborator (pywin32 by default)
        observers: Observers given to every handle produced
    """

    def __init__(
        self,
        config: Optional[BridgeConfig] = None,
        probe: Optional[ProcessProbe] = None,
        gateway: Optional[ComGateway] = None,
        observers: Optional[Iterable[CallObserver]] = None,
    ):
        self.config = config or BridgeConfig()
        self.probe = probe or Win32ProcessProbe()
        self.gateway = gateway or Win32ComGateway()
        self.observers = list(observers) if observers is not None else None

    def discover(self) -> List[SessionDescriptor]:
        """Running ETABS instances with their version info. Never raises."""
        try:
            instances = self.probe.list_processes(
                self.config.process_name, self.config.min_version)
        except Exception as e:
            logger.warning(f"ETABS discovery failed: {e}")
            return []
        logger.debug(f"Discovered {len(instances)} ETABS instance(s)")
        return list(instances)

    def _find_active(self) -> Optional[SessionDescriptor]:
        for descriptor in self.discover():
            if descriptor.has_main_window:
                return descriptor
        return None

    def attach(
        self,
        descriptor: Optional[SessionDescriptor] = None,
        min_version: Optional[int] = None,
    ) -> Optional[ModelHandle]:
        """Attach to a running ETABS instance.

        Args:
            descriptor: Instance to attach to; the first instance with an
                active main window when omitted
            min_version: Version floor (config.min_version when omitted)

        Returns:
            Attached ModelHandle, or None when no instance exposes an active
            main window

        Raises:
            ValidationError: for a non-positive min_version
            UnsupportedVersionError: if the instance is below the floor
            UnavailableSessionError: if the COM attach itself fails
        """
        context = ManagerCallContext("Attach")
        if min_version is None:
            min_version = self.config.min_version
        if isinstance(min_version, bool) or not isinstance(min_version, int):
            raise ValidationError("min_version", min_version, "must be an integer", context)
        require_range(min_version, "min_version", 1, context=context)

        if descriptor is None:
            descriptor = self._find_active()
            if descriptor is None:
                logger.info("No ETABS instance with an active window found")
                return None

        # A major version of 0 means the version could not be read
        if descriptor.major_version < min_version:
            raise UnsupportedVersionError(descriptor.full_version, min_version)

        logger.info(f"Connecting to ETABS v{descriptor.full_version} (PID {descriptor.process_id})")
        try:
            api = self.gateway.get_object(self.config.progid, self.config.helper_progid)
        except EtabsError:
            raise
        except Exception as e:
            raise UnavailableSessionError(
                f"Failed to attach to ETABS v{descriptor.full_version}: {e}", context=context) from e
        if api is None:
            raise UnavailableSessionError("No ETABS application object is registered", context=context)

        handle = ModelHandle(
            api,
            descriptor,
            api_version=self.gateway.api_version(self.config.helper_progid),
            observers=self.observers,
            config=self.config,
        )
        handle._attach()
        logger.info(f"Connected to ETABS v{descriptor.full_version}, API version {handle.api_version}")
        return handle

    def create_new(self, path: Optional[str] = None, start_ui: Optional[bool] = None) -> ModelHandle:
        """Start a new ETABS instance and attach to it.

        Args:
            path: ETABS.exe to start (config.program_path, else latest install)
            start_ui: Show the application window (config.start_ui when omitted)

        Returns:
            Attached ModelHandle

        Raises:
            NativeCallError: if the instance could not be created or started
        """
        path = path or self.config.program_path
        start_ui = self.config.start_ui if start_ui is None else start_ui
        context = ManagerCallContext("CreateObject", (path,) if path else ())

        try:
            api = self.gateway.create_object(self.config.progid, self.config.helper_progid, path)
        except EtabsError:
            raise
        except Exception as e:
            raise NativeCallError(
                f"Could not create ETABS instance: {e}",
                context=context, return_code=RETURN_LOCAL_FAILURE) from e
        if api is None:
            raise NativeCallError(
                "Helper returned no ETABS instance", context=context, return_code=RETURN_LOCAL_FAILURE)

        try:
            if start_ui:
                self._start_application(api)
            handle = ModelHandle(
                api,
                None,
                api_version=self.gateway.api_version(self.config.helper_progid),
                observers=self.observers,
                config=self.config,
            )
            try:
                handle._attach()
            except EtabsError as e:
                raise NativeCallError(
                    f"New ETABS instance exposes no model: {e}",
                    context=context, return_code=RETURN_LOCAL_FAILURE) from e
        except Exception:
            self._exit_orphan(api)
            raise
        logger.info(f"Created new ETABS instance, API version {handle.api_version}")
        return handle

    def _start_application(self, api: Any) -> None:
        context = ManagerCallContext("ApplicationStart")
        try:
            return_code, _ = split_native(api.ApplicationStart())
        except Exception as e:
            raise NativeCallError(
                f"ApplicationStart failed: {e}",
                context=context, return_code=RETURN_LOCAL_FAILURE) from e
        if return_code != 0:
            raise NativeCallError("ApplicationStart failed", context=context, return_code=return_code)

    @staticmethod
    def _exit_orphan(api: Any) -> None:
        """Best-effort exit of an instance this manager created but could not hand out."""
        try:
            api.ApplicationExit(False)
        except Exception as e:
            logger.warning(f"Could not exit half-started ETABS instance: {e}")

    def is_running(self) -> bool:
        return bool(self.discover())

    def is_supported_version_running(self) -> bool:
        return any(instance.is_supported for instance in self.discover())

    def active_version(self) -> Optional[int]:
        """Major version of the first instance with an active window."""
        descriptor = self._find_active()
        return descriptor.major_version if descriptor else None
