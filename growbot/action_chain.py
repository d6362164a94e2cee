"""Sequences of actions run one after another."""

import json
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from growbot.action import Action
from growbot.definitions import ACTIONCHAIN_LENGTH, ACTIONS_NUM, Scope

logger = logging.getLogger(__name__)


def _as_mapping(data: Mapping[str, Any] | str) -> Mapping[str, Any]:
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise ValueError("payload is not valid JSON") from exc
    if not isinstance(data, Mapping):
        raise ValueError("payload must be a JSON object")
    return data


def _item(data: Mapping[str, Any], key: str, index: int) -> Any:
    values = data.get(key)
    if isinstance(values, list) and index < len(values) and values[index] not in (None, ""):
        return values[index]
    return None


class ActionChain:
    """A fixed number of action slots, each with a pointer and a parameter."""

    def __init__(self, id: int, actions: Sequence[Action | None] = (),
                 scheduler: Callable[["ActionChain"], Any] | None = None):
        self.id = id
        self.actions = actions
        self.scheduler = scheduler
        self.reset()

    def reset(self) -> None:
        """Return to an empty, inactive chain."""
        self.title = f"Sequence {self.id}"
        self.active = False
        self.action_ptr = [ACTIONS_NUM] * ACTIONCHAIN_LENGTH
        self.action_par = [0] * ACTIONCHAIN_LENGTH
        self.assigned_actions: list[Action | None] = [None] * ACTIONCHAIN_LENGTH

    def get_title(self) -> str:
        return self.title

    def serialize_json(self, id: int, scope: Scope) -> str:
        document: dict[str, Any] = {}
        if scope in (Scope.LIST, Scope.DETAILS):
            document["tit"] = self.title
            document["act"] = self.active
        if scope == Scope.DETAILS:
            document["id"] = id
            document["obj"] = "ACTIONCHAIN"
            document["actptr"] = list(self.action_ptr)
            document["actpar"] = list(self.action_par)
        return json.dumps(document, separators=(",", ":"))

    def deserialize_json(self, data: Mapping[str, Any] | str) -> None:
        """Update the chain from a JSON object; unknown action indices raise ValueError."""
        data = _as_mapping(data)
        pointers = []
        parameters = []
        assigned: list[Action | None] = []
        for index in range(ACTIONCHAIN_LENGTH):
            raw = _item(data, "actptr", index)
            pointer = ACTIONS_NUM if raw is None else int(raw)
            if pointer == ACTIONS_NUM:
                assigned.append(None)
            elif 0 <= pointer < min(ACTIONS_NUM, len(self.actions)):
                assigned.append(self.actions[pointer])
            else:
                raise ValueError(f"no action with index {pointer}")
            pointers.append(pointer)
            raw_par = _item(data, "actpar", index)
            parameters.append(0 if raw_par is None else int(raw_par))

        if data.get("tit") not in (None, ""):
            self.title = str(data["tit"])
        if data.get("act") not in (None, ""):
            self.active = bool(data["act"])
        self.action_ptr = pointers
        self.action_par = parameters
        self.assigned_actions = assigned
        logger.debug("Deserialized action chain %s", self.id)

    def execute(self) -> None:
        """Hand the chain to the scheduler that runs its actions."""
        if self.scheduler is None:
            raise RuntimeError(f"action chain {self.id} has no scheduler")
        self.scheduler(self)