"""Actions that the rules engine and the user interface can run."""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from growbot.definitions import Scope
from growbot.log_engine import LogEngine

logger = logging.getLogger(__name__)


def _dump(document: dict[str, Any]) -> str:
    return json.dumps(document, separators=(",", ":"))


class Action(ABC):
    """Something the controller can do, optionally paired with its opposite."""

    def __init__(self, title: str, visible: bool = False):
        self.title = title
        self.visible = visible
        self.group_title = ""
        self.antagonist: "Action | None" = None

    def set_antagonist(self, group_title: str, antagonist: "Action") -> None:
        """Name the group of this action and the action that undoes it."""
        self.group_title = group_title
        self.antagonist = antagonist

    @abstractmethod
    def execute(self) -> None:
        """Run the action."""

    def get_title(self) -> str:
        return self.title

    def _serialize(self, id: int, scope: Scope, fields: dict[str, Any]) -> str:
        document: dict[str, Any] = {}
        if scope in (Scope.LIST, Scope.DETAILS):
            document.update(fields)
        if scope == Scope.DETAILS:
            document["id"] = id
            document["obj"] = "ACTION"
        return _dump(document)

    def serialize_json(self, id: int, scope: Scope) -> str:
        """The action as a JSON object; empty for scopes other than LIST and DETAILS."""
        fields = {"tit": self.get_title(), "grp": self.group_title, "vis": self.visible}
        return self._serialize(id, scope, fields)


class SimpleAction(Action):
    """An action that calls one function without arguments."""

    def __init__(self, title: str, callback: Callable[[], Any], visible: bool = False,
                 logengine: LogEngine | None = None):
        super().__init__(title, visible)
        if not callable(callback):
            raise TypeError("callback must be callable")
        self.callback = callback
        self.logengine = logengine

    def execute(self) -> None:
        logger.debug("Execute action %s", self.get_title())
        self.callback()
        if self.logengine is not None:
            self.logengine.add_log_entry(0, "Action", "OK: Execute Action",
                                         {"Action": self.get_title()})

    def serialize_json(self, id: int, scope: Scope) -> str:
        fields: dict[str, Any] = {"tit": self.title, "grp": self.group_title}
        if self.antagonist is not None:
            fields["opp"] = self.antagonist.title
        fields["vis"] = self.visible
        return self._serialize(id, scope, fields)


class ParameterizedSimpleAction(Action):
    """An action that calls one function with a fixed integer argument."""

    def __init__(self, title: str, callback: Callable[[int], Any], parameter: int,
                 visible: bool = False, logengine: LogEngine | None = None):
        super().__init__(title, visible)
        if not callable(callback):
            raise TypeError("callback must be callable")
        self.callback = callback
        self.parameter = parameter
        self.logengine = logengine

    def _log(self, message: str, value: str) -> None:
        if self.logengine is not None:
            self.logengine.add_log_entry(0, "Action", message, {"Action": value})

    def execute(self) -> None:
        """Call the function with the parameter; a negative parameter is an error."""
        if self.parameter < 0:
            self._log("ERROR: Argument missing", self.title)
            raise ValueError(f"action {self.title!r} has no argument")
        logger.debug("Execute action %s", self.get_title())
        self._log("OK: Execute Action", self.get_title())
        self.callback(self.parameter)

    def _fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {"tit": self.get_title(), "grp": self.group_title}
        if self.antagonist is not None:
            fields["anta"] = self.antagonist.get_title()
        fields["vis"] = self.visible
        fields["par"] = self.parameter
        return fields

    def serialize_json(self, id: int, scope: Scope) -> str:
        fields = self._fields()
        fields["tit"] = self.title
        return self._serialize(id, scope, fields)


class NamedParameterizedSimpleAction(ParameterizedSimpleAction):
    """A parameterised action whose title names the target of the parameter."""

    def __init__(self, title: str, callback: Callable[[int], Any],
                 title_lookup: Callable[[int], str], parameter: int,
                 visible: bool = False, logengine: LogEngine | None = None):
        super().__init__(title, callback, parameter, visible, logengine)
        if not callable(title_lookup):
            raise TypeError("title_lookup must be callable")
        self.title_lookup = title_lookup

    def get_title(self) -> str:
        return f"{self.title} {self.title_lookup(self.parameter)}"

    def serialize_json(self, id: int, scope: Scope) -> str:
        return self._serialize(id, scope, self._fields())