"""
Model handle: owner of one native ETABS session.

State machine Unattached -> Attached -> Disposed. Every native call goes
through `call` / `invoke`, which serialize access with a re-entrant lock,
assert the Attached state and translate runtime faults into the bridge error
taxonomy. Managers are created lazily on first access.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional
import threading
import logging

from ..core.bulk import BulkOperationCoordinator
from ..core.config import BridgeConfig
from ..core.data_models import HandleState, ManagerCallContext, SessionDescriptor
from ..core.errors import UnavailableSessionError
from ..core.mapper import ArrayResultMapper
from ..core.observers import CallEvent, CallObserver, EventKind, LoggingCallObserver
from ..core.translator import ErrorTranslator
from ..managers.analysis import AnalysisManager
from ..managers.areas import AreaManager
from ..managers.design import ConcreteDesignManager, SteelDesignManager
from ..managers.frames import FrameManager
from ..managers.groups import GroupManager, SelectionManager
from ..managers.loads import ComboManager, LoadCaseManager, LoadPatternManager
from ..managers.model_info import FileManager, ModelInfoManager, ProgramInfo
from ..managers.points import PointManager
from ..managers.properties import AreaSectionManager, FrameSectionManager, MaterialManager
from ..managers.results import ResultsManager
from ..managers.stories import StoryManager
from ..managers.tables import DatabaseTableManager
from .units import UnitSystemCache

logger = logging.getLogger(__name__)


class ModelHandle:
    """Exclusive owner of a native session (cOAPI and its SapModel).

    Created by ConnectionManager. Usable as a context manager; `close` is
    idempotent and releases the session exactly once.

    Attributes:
        descriptor: Discovered process the handle is attached to (None for
            sessions created by create_new)
        api_version: API version reported by the helper (0.0 when unknown)
        config: Bridge configuration
        mapper: Shared ArrayResultMapper
        translator: Shared ErrorTranslator
        coordinator: Bulk coordinator publishing to this handle's observers
    """

    def __init__(
        self,
        api: Any,
        descriptor: Optional[SessionDescriptor] = None,
        *,
        api_version: float = 0.0,
        observers: Optional[Iterable[CallObserver]] = None,
        config: Optional[BridgeConfig] = None,
    ):
        self._api = api
        self._sap_model: Any = None
        self._state = HandleState.UNATTACHED
        self._lock = threading.RLock()
        self._observers: List[CallObserver] = (
            list(observers) if observers is not None else [LoggingCallObserver()])
        self._managers: Dict[str, Any] = {}
        self._program_info: Optional[ProgramInfo] = None

        self.descriptor = descriptor
        self.api_version = api_version
        self.config = config or BridgeConfig()
        self.mapper = ArrayResultMapper()
        self.translator = ErrorTranslator()
        self.coordinator = BulkOperationCoordinator(emit=self.emit)
        self._units = UnitSystemCache(self)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def state(self) -> HandleState:
        return self._state

    @property
    def is_attached(self) -> bool:
        return self._state == HandleState.ATTACHED

    def _attach(self) -> "ModelHandle":
        """Resolve the SapModel of the native session (Unattached -> Attached)."""
        context = ManagerCallContext("Attach")
        with self._lock:
            if self._state != HandleState.UNATTACHED:
                raise UnavailableSessionError(
                    f"Cannot attach a handle in state {self._state.value}", context=context)
            try:
                sap_model = self._api.SapModel
            except Exception as exc:
                raise self.translator.translate(exc, context) from exc
            if sap_model is None:
                raise UnavailableSessionError("Native session exposes no model", context=context)
            self._sap_model = sap_model
            self._state = HandleState.ATTACHED
        self.emit(CallEvent(EventKind.LIFECYCLE, context, detail=f"attached ({self.full_version})"))
        return self

    def close(self, save_prompt: bool = False, exit_application: bool = True) -> None:
        """Release the native session. Safe to call any number of times.

        Args:
            save_prompt: Let ETABS prompt to save before exiting
            exit_application: Exit the ETABS application (ApplicationExit);
                when False only the references are released

        A failure of ApplicationExit is reported to the observers and does
        not prevent the handle from being disposed.
        """
        context = ManagerCallContext("ApplicationExit")
        with self._lock:
            if self._state == HandleState.DISPOSED:
                return
            was_attached = self._state == HandleState.ATTACHED
            try:
                if was_attached and exit_application and self._api is not None:
                    self._api.ApplicationExit(save_prompt)
            except Exception as exc:
                self.emit(CallEvent(EventKind.FAULTED, context, self.translator.translate(exc, context)))
            finally:
                self._api = None
                self._sap_model = None
                self._managers.clear()
                self._state = HandleState.DISPOSED
        self.emit(CallEvent(EventKind.LIFECYCLE, context, detail="session released"))

    def __enter__(self) -> "ModelHandle":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ModelHandle(state={self._state.value}, version={self.full_version})"

    # ------------------------------------------------------------------
    # Native call choke point
    # ------------------------------------------------------------------

    def _require_attached(self, context: ManagerCallContext) -> None:
        if self._state != HandleState.ATTACHED:
            raise UnavailableSessionError(
                f"Model handle is {self._state.value}", context=context)

    def call(self, context: ManagerCallContext, fn: Callable[..., Any], *args: Any) -> Any:
        """Run fn(*args) under the handle lock with state check and fault translation."""
        with self._lock:
            self._require_attached(context)
            try:
                return fn(*args)
            except Exception as exc:
                error = self.translator.translate(exc, context)
                self.emit(CallEvent(EventKind.FAULTED, context, error))
                if error is exc:
                    raise
                raise error from exc

    def invoke(self, context: ManagerCallContext, path: str, *args: Any) -> Any:
        """Call the SapModel member at a dotted path, e.g. 'PointObj.GetNameList'."""
        return self.call(context, lambda *a: self._resolve(path)(*a), *args)

    def _resolve(self, path: str) -> Any:
        target = self._sap_model
        for part in path.split("."):
            target = getattr(target, part)
        return target

    @property
    def sap_model(self) -> Any:
        """Raw SapModel for calls the managers do not cover"""
        self._require_attached(ManagerCallContext("SapModel"))
        return self._sap_model

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def add_observer(self, observer: CallObserver) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: CallObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def emit(self, event: CallEvent) -> None:
        for observer in list(self._observers):
            observer.notify(event)

    # ------------------------------------------------------------------
    # Version info
    # ------------------------------------------------------------------

    @property
    def version(self) -> int:
        """Major version of the attached ETABS"""
        if self.descriptor is not None and self.descriptor.major_version:
            return self.descriptor.major_version
        return int(self.program_info().version.split(".")[0] or 0)

    @property
    def full_version(self) -> str:
        if self.descriptor is not None:
            return self.descriptor.full_version
        if self._program_info is not None:
            return self._program_info.version
        return "unknown"

    def program_info(self) -> ProgramInfo:
        """Program name, version and level; cached after the first read."""
        if self._program_info is None:
            self._program_info = self.model_info.program_info()
        return self._program_info

    # ------------------------------------------------------------------
    # Managers
    # ------------------------------------------------------------------

    def _manager(self, key: str, factory: Callable[["ModelHandle"], Any]) -> Any:
        with self._lock:
            self._require_attached(ManagerCallContext(key))
            if key not in self._managers:
                self._managers[key] = factory(self)
            return self._managers[key]

    @property
    def units(self) -> UnitSystemCache:
        return self._units

    @property
    def model_info(self) -> ModelInfoManager:
        return self._manager("model_info", ModelInfoManager)

    @property
    def files(self) -> FileManager:
        return self._manager("files", FileManager)

    @property
    def points(self) -> PointManager:
        return self._manager("points", PointManager)

    @property
    def frames(self) -> FrameManager:
        return self._manager("frames", FrameManager)

    @property
    def areas(self) -> AreaManager:
        return self._manager("areas", AreaManager)

    @property
    def stories(self) -> StoryManager:
        return self._manager("stories", StoryManager)

    @property
    def groups(self) -> GroupManager:
        return self._manager("groups", GroupManager)

    @property
    def selection(self) -> SelectionManager:
        return self._manager("selection", SelectionManager)

    @property
    def materials(self) -> MaterialManager:
        return self._manager("materials", MaterialManager)

    @property
    def frame_sections(self) -> FrameSectionManager:
        return self._manager("frame_sections", FrameSectionManager)

    @property
    def area_sections(self) -> AreaSectionManager:
        return self._manager("area_sections", AreaSectionManager)

    @property
    def load_patterns(self) -> LoadPatternManager:
        return self._manager("load_patterns", LoadPatternManager)

    @property
    def load_cases(self) -> LoadCaseManager:
        return self._manager("load_cases", LoadCaseManager)

    @property
    def combos(self) -> ComboManager:
        return self._manager("combos", ComboManager)

    @property
    def analysis(self) -> AnalysisManager:
        return self._manager("analysis", AnalysisManager)

    @property
    def results(self) -> ResultsManager:
        return self._manager("results", ResultsManager)

    @property
    def steel_design(self) -> SteelDesignManager:
        return self._manager("steel_design", SteelDesignManager)

    @property
    def concrete_design(self) -> ConcreteDesignManager:
        return self._manager("concrete_design", ConcreteDesignManager)

    @property
    def tables(self) -> DatabaseTableManager:
        return self._manager("tables", DatabaseTableManager)
