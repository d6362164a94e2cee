"""Rule sets: up to three triggers joined by boolean operators."""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from growbot.action_chain import ActionChain
from growbot.definitions import ACTIONCHAINS_NUM, TRIGGER_SETS, TRIGGER_TYPES, BoolOp, Scope

logger = logging.getLogger(__name__)

_TRIGGER_SLOTS = 3


class Trigger(ABC):
    """A condition that a rule set can evaluate."""

    @abstractmethod
    def check_state(self) -> bool:
        """Whether the condition holds now."""

    @abstractmethod
    def get_title(self) -> str:
        """A name for the user interface."""


def _as_mapping(data: Mapping[str, Any] | str) -> Mapping[str, Any]:
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise ValueError("payload is not valid JSON") from exc
    if not isinstance(data, Mapping):
        raise ValueError("payload must be a JSON object")
    return data


def _present(value: Any) -> bool:
    return value not in (None, "")


class RuleSet:
    """Evaluates its triggers left to right and runs its chain when they hold."""

    def __init__(self, id: int, triggers: Sequence[Sequence[Trigger | None]] = (),
                 chains: Sequence[ActionChain | None] = ()):
        self.id = id
        self.triggers = triggers
        self.chains = chains
        self.reset()

    def get_title(self) -> str:
        return self.title

    def reset(self) -> None:
        """Return to an empty, inactive rule set."""
        self.title = f"Ruleset {self.id}"
        self.active = False
        self.assigned_triggers: list[Trigger | None] = [None] * _TRIGGER_SLOTS
        self.bool_ops = [BoolOp.AND, BoolOp.AND]
        self.assigned_chain: ActionChain | None = None
        self.trigger_cats = [TRIGGER_TYPES] * _TRIGGER_SLOTS
        self.trigger_sets = [TRIGGER_SETS] * _TRIGGER_SLOTS
        self.chain_ptr = ACTIONCHAINS_NUM

    def check_state(self) -> bool:
        """Evaluate the triggers up to the first empty slot; inactive sets are false."""
        state = False
        if not self.active:
            return state
        for index, trigger in enumerate(self.assigned_triggers):
            if trigger is None:
                break
            if index == 0:
                state = trigger.check_state()
                continue
            op = self.bool_ops[index - 1]
            if op == BoolOp.AND:
                state = state and trigger.check_state()
            elif op == BoolOp.OR:
                state = state or trigger.check_state()
            else:
                state = state and not trigger.check_state()
            logger.debug("%s trigger %s -> %s", op.name, trigger.get_title(), state)
        return state

    def serialize_json(self, id: int, scope: Scope) -> str:
        document: dict[str, Any] = {}
        if scope in (Scope.LIST, Scope.DETAILS):
            document["tit"] = self.title
            document["act"] = self.active
        if scope == Scope.DETAILS:
            document["id"] = id
            document["obj"] = "RULESET"
            for slot in range(_TRIGGER_SLOTS):
                document[f"tset{slot + 1}_ptr"] = self.trigger_sets[slot]
                document[f"tcat{slot + 1}_ptr"] = self.trigger_cats[slot]
            document["chain_ptr"] = self.chain_ptr
            document["bool"] = [int(op) for op in self.bool_ops]
        return json.dumps(document, separators=(",", ":"))

    def _lookup_trigger(self, cat: int, index: int) -> Trigger | None:
        if cat == TRIGGER_TYPES or index == TRIGGER_SETS:
            return None
        if not (0 <= cat < min(TRIGGER_TYPES, len(self.triggers))):
            raise ValueError(f"no trigger category {cat}")
        row = self.triggers[cat]
        if not (0 <= index < min(TRIGGER_SETS, len(row))):
            raise ValueError(f"no trigger {index} in category {cat}")
        return row[index]

    def _lookup_chain(self, pointer: int) -> ActionChain | None:
        if pointer == ACTIONCHAINS_NUM:
            return None
        if not (0 <= pointer < min(ACTIONCHAINS_NUM, len(self.chains))):
            raise ValueError(f"no action chain {pointer}")
        return self.chains[pointer]

    def deserialize_json(self, data: Mapping[str, Any] | str) -> None:
        """Update the rule set from a JSON object; unknown indices raise ValueError.

        An unknown boolean operator becomes OR and deactivates the set.
        """
        data = _as_mapping(data)
        title = str(data["tit"]) if _present(data.get("tit")) else self.title
        active = bool(data["act"]) if _present(data.get("act")) else self.active

        sets = list(self.trigger_sets)
        cats = list(self.trigger_cats)
        for slot in range(_TRIGGER_SLOTS):
            if _present(data.get(f"tset{slot + 1}_ptr")):
                sets[slot] = int(data[f"tset{slot + 1}_ptr"])
            if _present(data.get(f"tcat{slot + 1}_ptr")):
                cats[slot] = int(data[f"tcat{slot + 1}_ptr"])
        chain_ptr = int(data["chain_ptr"]) if _present(data.get("chain_ptr")) else self.chain_ptr

        ops = list(self.bool_ops)
        raw_ops = data.get("bool")
        if isinstance(raw_ops, list):
            for slot, raw in enumerate(raw_ops[:len(ops)]):
                if not _present(raw):
                    continue
                try:
                    ops[slot] = BoolOp(int(raw))
                except ValueError:
                    ops[slot] = BoolOp.OR
                    active = False

        assigned = [self._lookup_trigger(cat, index) for cat, index in zip(cats, sets)]
        chain = self._lookup_chain(chain_ptr)

        self.title = title
        self.active = active
        self.trigger_sets = sets
        self.trigger_cats = cats
        self.chain_ptr = chain_ptr
        self.bool_ops = ops
        self.assigned_triggers = assigned
        self.assigned_chain = chain
        logger.debug("Deserialized rule set %s", self.id)

    def execute(self) -> bool:
        """Run the assigned chain if the triggers hold; return whether it ran."""
        if self.check_state() and self.assigned_chain is not None:
            self.assigned_chain.execute()
            return True
        return False