"""
Proposal Action Execution

Delivers an accepted proposal's call data to its recipient. Recipients are
modelled as handlers registered on the executor, either for any call or for
one function selector. A recipient with no handler behaves like an account
without code: the call succeeds and does nothing.

Handlers may be plain callables or coroutine functions; a handler that
raises or returns a falsy value marks the execution as failed.
"""

import inspect
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from ..crypto.address import normalize_address
from ..crypto.contract import compute_function_selector
from ..logger import get_logger
from .proposals import GovernanceError, ProposalAction

logger = get_logger(__name__)

ActionHandler = Callable[[ProposalAction], Union[Any, Awaitable[Any]]]


# ══════════════════════════════════════════════════════════════════════
#  EXCEPTIONS
# ══════════════════════════════════════════════════════════════════════

class ExecutionFailedError(GovernanceError):
    """The accepted proposal's action reported failure."""


class ReentrancyError(GovernanceError):
    """A DAO operation was invoked from inside another operation of the same DAO."""


# ══════════════════════════════════════════════════════════════════════
#  EXECUTION LOG
# ══════════════════════════════════════════════════════════════════════

@dataclass
class ExecutionRecord:
    """Outcome of one delivery attempt."""
    recipient: str
    selector: bytes
    success: bool
    error: Optional[str] = None
    executed_at: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recipient": self.recipient,
            "selector": "0x" + self.selector.hex(),
            "success": self.success,
            "error": self.error,
            "executedAt": self.executed_at,
        }


# ══════════════════════════════════════════════════════════════════════
#  EXECUTOR
# ══════════════════════════════════════════════════════════════════════

class ActionExecutor:
    """
    Routes proposal actions to registered recipient handlers.

    Lookup order: (recipient, selector) handler first, then the recipient's
    catch-all handler. No handler at all counts as success.
    """

    def __init__(self):
        self._handlers: Dict[str, ActionHandler] = {}
        self._function_handlers: Dict[Tuple[str, bytes], ActionHandler] = {}
        self._log: List[ExecutionRecord] = []

    # ── Registration ──────────────────────────────────────────────────

    def register(self, recipient: str, handler: ActionHandler):
        """Handle every call sent to *recipient*."""
        self._handlers[normalize_address(recipient)] = handler

    def register_function(self, recipient: str, signature: str, handler: ActionHandler):
        """Handle calls to *recipient* whose selector matches *signature*."""
        key = (normalize_address(recipient), compute_function_selector(signature))
        self._function_handlers[key] = handler

    def unregister(self, recipient: str):
        """Drop every handler registered for *recipient*."""
        recipient = normalize_address(recipient)
        self._handlers.pop(recipient, None)
        for key in [k for k in self._function_handlers if k[0] == recipient]:
            del self._function_handlers[key]

    def resolve(self, action: ProposalAction) -> Optional[ActionHandler]:
        recipient = normalize_address(action.recipient)
        handler = self._function_handlers.get((recipient, action.selector))
        if handler is None:
            handler = self._handlers.get(recipient)
        return handler

    # ── Execution ─────────────────────────────────────────────────────

    async def execute(self, action: ProposalAction) -> bool:
        """
        Deliver *action* exactly once.

        Returns:
            True on success, False if the handler raised or returned a falsy value
        """
        handler = self.resolve(action)
        if handler is None:
            logger.debug(f"No handler for {action.recipient}; call treated as a plain transfer")
            self._log.append(ExecutionRecord(action.recipient, action.selector, True))
            return True

        error = None
        try:
            result = handler(action)
            if inspect.isawaitable(result):
                result = await result
            success = bool(result)
            if not success:
                error = "handler returned a falsy result"
        except Exception as e:
            logger.warning(f"Action call to {action.recipient} raised: {e}")
            success = False
            error = f"{type(e).__name__}: {e}"

        self._log.append(ExecutionRecord(action.recipient, action.selector, success, error))
        if success:
            logger.info(f"Action delivered to {action.recipient}")
        return success

    # ── Queries ───────────────────────────────────────────────────────

    @property
    def execution_log(self) -> List[ExecutionRecord]:
        return list(self._log)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recipients": sorted(self._handlers),
            "functions": sorted(
                f"{r}:0x{s.hex()}" for r, s in self._function_handlers
            ),
            "executions": [r.to_dict() for r in self._log],
        }

    def __repr__(self) -> str:
        return (
            f"<ActionExecutor handlers={len(self._handlers) + len(self._function_handlers)} "
            f"executions={len(self._log)}>"
        )
