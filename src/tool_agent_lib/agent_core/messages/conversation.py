"""Append-only conversation log owned by one agent session."""

from typing import Iterator, Set, Tuple

from ..exceptions import ConversationError
from ..logger import get_logger
from .models import Role, Turn

logger = get_logger(__name__)


class ConversationState:
    """
    Ordered transcript handed to the model on every cycle.

    The system turn is inserted once at construction and stays at index 0.
    ``append`` is the only mutation.
    """

    def __init__(self, system_instruction: str) -> None:
        """Initialize the transcript with its system turn.

        Args:
            system_instruction: Fixed instruction placed at index 0.
        """
        self._turns: list[Turn] = [Turn.system(system_instruction)]
        self._issued_call_ids: Set[str] = set()
        self._answered_call_ids: Set[str] = set()

    def append(self, turn: Turn) -> None:
        """Append a turn to the log.

        Raises:
            ConversationError: If the turn is a second system turn, or a tool turn
                that does not answer an open tool call of an earlier assistant turn.
        """
        if turn.role is Role.SYSTEM:
            raise ConversationError("The system turn is fixed at session start and cannot be appended again.")

        if turn.role is Role.TOOL:
            call_id = turn.tool_call_id
            if not call_id or call_id not in self._issued_call_ids:
                raise ConversationError(f"Tool turn references unknown tool call id '{call_id}'.")
            if call_id in self._answered_call_ids:
                raise ConversationError(f"Tool call '{call_id}' has already been answered.")
            self._answered_call_ids.add(call_id)

        if turn.role is Role.ASSISTANT and turn.tool_calls:
            self._issued_call_ids.update(call.id for call in turn.tool_calls)

        self._turns.append(turn)
        logger.debug("Appended %s turn (#%d).", turn.role.value, len(self._turns) - 1)

    def snapshot(self) -> Tuple[Turn, ...]:
        """Return a read-only view of the transcript."""
        return tuple(self._turns)

    @property
    def system_turn(self) -> Turn:
        return self._turns[0]

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))
