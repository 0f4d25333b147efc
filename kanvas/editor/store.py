"""Editor session store: owns the state and runs the fetches the reducer asks for"""
import asyncio
import logging
from typing import Callable, Optional, Set

from ..config import settings
from ..elements.defaults import new_element_id
from ..exceptions import CollaboratorError
from ..layout.engine import Canvas
from .actions import Action, ReceiveData, ShowMessage
from .reducer import ReducerContext, reduce
from .state import EditorState, FetchRequest, StatusMessage

logger = logging.getLogger(__name__)


class EditorStore:
    """
    Single-session state container.

    ``dispatch`` is synchronous and replaces the state wholesale. Data
    fetches run as tasks on the running event loop and feed their result
    back through ``dispatch(ReceiveData(...))``, so a fetch for an element
    deleted in the meantime is dropped by the reducer.
    """

    def __init__(
        self,
        client=None,
        id_factory: Callable[[], str] = new_element_id,
        canvas: Optional[Canvas] = None,
        grid: Optional[int] = None,
        state: Optional[EditorState] = None,
    ):
        self._client = client
        self._context = ReducerContext(
            id_factory=id_factory,
            canvas=canvas or Canvas(settings.CANVAS_WIDTH, settings.CANVAS_HEIGHT),
            grid=grid if grid is not None else settings.GRID_SIZE,
        )
        self._state = state or EditorState()
        self._tasks: Set[asyncio.Task] = set()

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def client(self):
        return self._client

    def dispatch(self, action: Action) -> EditorState:
        """Apply ``action`` and schedule any data fetches it produces"""
        new_state, fetches = reduce(self._state, action, self._context)
        self._state = new_state
        for request in fetches:
            self._schedule(request)
        return new_state

    def _schedule(self, request: FetchRequest) -> None:
        if self._client is None:
            logger.debug(f"No collaborator client; fetch {request.request_id} not run")
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"No running event loop; fetch {request.request_id} for {request.element_id} not run")
            return
        task = loop.create_task(self._run_fetch(request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_fetch(self, request: FetchRequest) -> None:
        logger.info(f"Fetching data for element {request.element_id} (request {request.request_id})")
        logger.debug(f"Query: {request.query[:200]}")
        try:
            rows = await self._client.execute_query(request.query)
        except CollaboratorError as e:
            logger.warning(f"Data fetch {request.request_id} for {request.element_id} failed: {e.message}")
            self.dispatch(ShowMessage(StatusMessage.error(f"Error fetching data: {e.message}")))
            return
        self.dispatch(ReceiveData(element_id=request.element_id, request_id=request.request_id, rows=rows))

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> EditorState:
        """Wait until every scheduled fetch (including ones they trigger) is done"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
        return self._state
